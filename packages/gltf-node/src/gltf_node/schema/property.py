# SPDX-License-Identifier: MIT
"""Properties shared by every glTF object that lives in a top-level array."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from gltf_node.io.stream import PropertyReader, PropertyWriter
from gltf_node.schema.context import DocumentContext

logger = logging.getLogger(__name__)


@dataclass
class ChildOfRootProperty:
    """Common ``name``/``extensions``/``extras`` group.

    Properties no schema class recognizes are captured in
    ``unknown_properties`` so that parsing never fails on them. They are not
    written back out.
    """

    name: str | None = None
    extensions: dict[str, Any] = field(default_factory=dict)
    extras: Any = None
    unknown_properties: dict[str, Any] = field(default_factory=dict)

    def read_common_property(
        self,
        context: DocumentContext,
        reader: PropertyReader,
        property_name: str,
    ) -> None:
        """Read a property the subclass did not handle itself."""
        if property_name == "name":
            self.name = reader.read_string()
        elif property_name == "extensions":
            value = reader.read_value()
            if isinstance(value, dict):
                self.extensions = value
            else:
                logger.debug("Ignoring non-object 'extensions': %r", value)
                self.unknown_properties[property_name] = value
        elif property_name == "extras":
            self.extras = reader.read_value()
        else:
            logger.debug("Capturing unknown property '%s'", property_name)
            self.unknown_properties[property_name] = reader.read_value()

    def write_common_properties(self, writer: PropertyWriter) -> None:
        """Write name, extensions and extras when set."""
        if self.name is not None:
            writer.write_property_name("name")
            writer.write_value(self.name)

        if self.extensions:
            writer.write_property_name("extensions")
            writer.write_raw(self.extensions)

        if self.extras is not None:
            writer.write_property_name("extras")
            writer.write_raw(self.extras)
