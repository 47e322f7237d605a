"""
Core type definitions for flatc4.

The model is "flat": the four C4 levels live in four parallel collections
and children point at their parents by id. Every type serialises with
camelCase aliases so a dumped model keeps the editor's wire shape
(``systemId``, ``codeElements``, ``viewLevel``...).
"""

from enum import StrEnum
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ViewLevel(StrEnum):
    """Depth of navigation in the C4 hierarchy, shallowest first."""
    SYSTEM = "system"
    CONTAINER = "container"
    COMPONENT = "component"
    CODE = "code"

    @property
    def depth(self) -> int:
        return VIEW_LEVELS.index(self)

    @property
    def parent(self) -> "ViewLevel | None":
        if self is ViewLevel.SYSTEM:
            return None
        return VIEW_LEVELS[self.depth - 1]


VIEW_LEVELS: List[ViewLevel] = [
    ViewLevel.SYSTEM,
    ViewLevel.CONTAINER,
    ViewLevel.COMPONENT,
    ViewLevel.CODE,
]

# Entity kinds share their tags with the view levels.
BlockType = ViewLevel


class CodeType(StrEnum):
    """Kinds of code elements."""
    CLASS = "class"
    INTERFACE = "interface"
    OTHER = "other"


class C4Model(BaseModel):
    """Base for every flatc4 record: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class Position(C4Model):
    x: float = 0.0
    y: float = 0.0


class Connection(C4Model):
    """
    Directed edge from the owning block to another block of the same level.

    The owning block is implicit: connections are stored on their source.
    """
    target_id: str
    source_handle: str | None = None
    target_handle: str | None = None
    label: str | None = None
    technology: str | None = None
    description: str | None = None
    label_position: float | None = None
    bidirectional: bool | None = None


class OriginalRef(C4Model):
    """Back-reference carried by a clone to the block it was duplicated from."""
    id: str
    name: str
    type: ViewLevel | None = None


class BaseBlock(C4Model):
    id: str
    name: str
    type: ViewLevel
    position: Position = Field(default_factory=Position)
    description: str | None = None
    technology: str | None = None
    url: str | None = None
    connections: List[Connection] = Field(default_factory=list)
    original: OriginalRef | None = None

    @property
    def is_clone(self) -> bool:
        return self.original is not None


class SystemBlock(BaseBlock):
    type: ViewLevel = ViewLevel.SYSTEM


class ContainerBlock(BaseBlock):
    type: ViewLevel = ViewLevel.CONTAINER
    system_id: str | None = None


class ComponentBlock(BaseBlock):
    type: ViewLevel = ViewLevel.COMPONENT
    container_id: str | None = None
    system_id: str | None = None


class CodeBlock(BaseBlock):
    type: ViewLevel = ViewLevel.CODE
    component_id: str | None = None
    code_type: CodeType = CodeType.CLASS
    code: str | None = None


Block = Union[SystemBlock, ContainerBlock, ComponentBlock, CodeBlock]


class FlatC4Model(C4Model):
    """
    The whole diagram: four entity collections plus the navigation pointers.

    Invariant: a pointer for a level deeper than ``view_level`` is None.
    """
    systems: List[SystemBlock] = Field(default_factory=list)
    containers: List[ContainerBlock] = Field(default_factory=list)
    components: List[ComponentBlock] = Field(default_factory=list)
    code_elements: List[CodeBlock] = Field(default_factory=list)
    view_level: ViewLevel = ViewLevel.SYSTEM
    active_system_id: str | None = None
    active_container_id: str | None = None
    active_component_id: str | None = None

    def collection(self, level: ViewLevel) -> List[Block]:
        """Entity collection holding blocks of the given level."""
        return getattr(self, COLLECTION_FIELDS[level])

    def iter_blocks(self):
        """All blocks in collection-then-insertion order."""
        yield from self.systems
        yield from self.containers
        yield from self.components
        yield from self.code_elements


COLLECTION_FIELDS: Dict[ViewLevel, str] = {
    ViewLevel.SYSTEM: "systems",
    ViewLevel.CONTAINER: "containers",
    ViewLevel.COMPONENT: "components",
    ViewLevel.CODE: "code_elements",
}

BLOCK_CLASSES: Dict[ViewLevel, type] = {
    ViewLevel.SYSTEM: SystemBlock,
    ViewLevel.CONTAINER: ContainerBlock,
    ViewLevel.COMPONENT: ComponentBlock,
    ViewLevel.CODE: CodeBlock,
}

DEFAULT_NAMES: Dict[ViewLevel, str] = {
    ViewLevel.SYSTEM: "New System",
    ViewLevel.CONTAINER: "New Container",
    ViewLevel.COMPONENT: "New Component",
    ViewLevel.CODE: "New Code Element",
}


# =============================================================================
# Patches
# =============================================================================

class BlockPatch(C4Model):
    """
    Partial update for a block.

    Only fields explicitly set on the patch are merged; an explicit None
    clears the field.
    """
    name: str | None = None
    position: Position | None = None
    description: str | None = None
    technology: str | None = None
    url: str | None = None
    connections: List[Connection] | None = None
    original: OriginalRef | None = None

    def changes(self) -> Dict[str, Any]:
        """Field values explicitly set on this patch, keyed by field name."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class SystemPatch(BlockPatch):
    pass


class ContainerPatch(BlockPatch):
    system_id: str | None = None


class ComponentPatch(BlockPatch):
    container_id: str | None = None
    system_id: str | None = None


class CodePatch(BlockPatch):
    component_id: str | None = None
    code_type: CodeType | None = None
    code: str | None = None


class ConnectionPatch(C4Model):
    source_handle: str | None = None
    target_handle: str | None = None
    label: str | None = None
    technology: str | None = None
    description: str | None = None
    label_position: float | None = None
    bidirectional: bool | None = None

    def changes(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}


PATCH_CLASSES: Dict[ViewLevel, type] = {
    ViewLevel.SYSTEM: SystemPatch,
    ViewLevel.CONTAINER: ContainerPatch,
    ViewLevel.COMPONENT: ComponentPatch,
    ViewLevel.CODE: CodePatch,
}


class ConnectionInfo(C4Model):
    """Connection description exchanged with the edit/connect dialogs."""
    id: str
    source_id: str
    target_id: str
    label: str | None = None
    technology: str | None = None
    description: str | None = None
    label_position: float | None = None
    bidirectional: bool | None = None
    source_handle: str | None = None
    target_handle: str | None = None

    @staticmethod
    def edge_id(source_id: str, target_id: str) -> str:
        return f"{source_id}->{target_id}"
