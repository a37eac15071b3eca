"""
Structural subtyping and biased unification over Rust-like type shapes,
plus the little grammar for writing down type names.
"""
from .type_name import TypeName, PointerKind, ShapeKind, Indirection, DuplicateNamesInScope, render
from .grammar import parse, parse_structure, parse_catalog, TypeNameParseError
from .structure import (
	TypeStructure, Opaque, Primitive, Struct, TupleStruct, Enum, OpaqueTuple, OpaqueFields,
	Pointer, Array, Slice, Named, OPAQUE, UNIT,
)
from .subtyping import IsSubtypeOf, is_structural_subtype_of
from .unification import unify
from .rust_type import RustType, PRIMITIVES
from .catalog import TypeCatalog
