# SPDX-License-Identifier: MIT
"""Document schema support: index resolution and common properties."""

from .context import DocumentContext, ReferenceKind
from .property import ChildOfRootProperty

__all__ = [
    "DocumentContext",
    "ReferenceKind",
    "ChildOfRootProperty",
]
