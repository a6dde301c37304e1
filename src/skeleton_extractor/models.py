from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Visibility(_Frozen):
    kind: Literal["public", "restricted", "inherited"] = "inherited"
    clause: str = ""

    def render(self) -> str:
        if self.kind == "public":
            return "pub"
        if self.kind == "restricted":
            return self.clause
        return ""


class StructField(_Frozen):
    name: Optional[str] = None
    ty: str
    visibility: Visibility = Field(default_factory=Visibility)
    attributes: List[str] = Field(default_factory=list)


class Variant(_Frozen):
    name: str
    docs: List[str] = Field(default_factory=list)
    shape: Literal["unit", "named", "tuple"] = "unit"
    fields: List[StructField] = Field(default_factory=list)
    discriminant: Optional[str] = None
    attributes: List[str] = Field(default_factory=list)


class MethodSignature(_Frozen):
    name: str
    signature: str
    visibility: Visibility = Field(default_factory=Visibility)
    docs: List[str] = Field(default_factory=list)


class _Item(_Frozen):
    name: str
    visibility: Visibility = Field(default_factory=Visibility)
    generics: str = ""
    where_clause: str = ""
    docs: List[str] = Field(default_factory=list)


class FunctionDecl(_Item):
    kind: Literal["function"] = "function"
    signature: str


class StructDecl(_Item):
    kind: Literal["struct"] = "struct"
    shape: Literal["unit", "named", "tuple"] = "unit"
    fields: List[StructField] = Field(default_factory=list)


class EnumDecl(_Item):
    kind: Literal["enum"] = "enum"
    variants: List[Variant] = Field(default_factory=list)


class TraitDecl(_Item):
    kind: Literal["trait"] = "trait"
    unsafe: bool = False
    supertraits: List[str] = Field(default_factory=list)
    methods: List[MethodSignature] = Field(default_factory=list)


class ImplDecl(_Item):
    """An impl block. ``name`` mirrors ``self_ty`` so every item has one."""

    kind: Literal["impl"] = "impl"
    unsafe: bool = False
    negative: bool = False
    trait_path: Optional[str] = None
    self_ty: str
    methods: List[MethodSignature] = Field(default_factory=list)


class OtherDecl(_Frozen):
    kind: Literal["other"] = "other"
    node_type: str


Declaration = Annotated[
    Union[FunctionDecl, StructDecl, EnumDecl, TraitDecl, ImplDecl, OtherDecl],
    Field(discriminator="kind"),
]


class SourceTree(_Frozen):
    path: str
    declarations: List[Declaration] = Field(default_factory=list)

    def names(self) -> List[str]:
        """Names of the recognized declarations, in source order."""
        return [d.name for d in self.declarations if not isinstance(d, OtherDecl)]
