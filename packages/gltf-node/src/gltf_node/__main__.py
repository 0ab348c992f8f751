# SPDX-License-Identifier: MIT
"""Allow ``python -m gltf_node``."""

import sys

from gltf_node.cli import main

sys.exit(main())
