"""
A type as somebody extracted it: its name, its shape, and its layout in memory.

The layout numbers are carried, not computed. Whoever performs a reinterpretation
of bytes on the strength of a subtyping proof will want them, and they had better
come from the same place that produced the shape.
"""
from typing import Iterable, NamedTuple, Optional, Hashable
from .type_name import TypeName, UNKNOWN_NAME, BOTTOM_NAME
from .structure import TypeStructure, Primitive, OPAQUE
from .subtyping import IsSubtypeOf, RESOLVER, is_structural_subtype_of
from .unification import unify

class RustType(NamedTuple):
	name: TypeName
	structure: TypeStructure
	size: Optional[int] = None
	align: Optional[int] = None
	type_id: Optional[Hashable] = None

	@staticmethod
	def unknown() -> "RustType":
		return RustType(UNKNOWN_NAME, OPAQUE)

	@staticmethod
	def bottom() -> "RustType":
		""" The type with no values, which is therefore a subtype of everything. """
		return RustType(BOTTOM_NAME, OPAQUE)

	def is_unknown(self) -> bool: return self.name == UNKNOWN_NAME
	def is_bottom(self) -> bool: return self.name == BOTTOM_NAME

	def is_rough_subtype_of(self, other:"RustType", resolve:RESOLVER=None) -> IsSubtypeOf:
		"""
		Like the structural check, but bottom is special
		and known type identities settle the question outright.
		"""
		if self.is_bottom(): return IsSubtypeOf.YES
		if other.is_bottom(): return IsSubtypeOf.NO
		if self.type_id is not None and other.type_id is not None:
			return IsSubtypeOf.YES if self.type_id == other.type_id else IsSubtypeOf.NO
		return self.is_structural_subtype_of(other, resolve)

	def is_structural_subtype_of(self, other:"RustType", resolve:RESOLVER=None) -> IsSubtypeOf:
		return is_structural_subtype_of(self.structure, other.structure, resolve)

	def unify(self, other:"RustType", resolve:RESOLVER=None) -> "RustType":
		if self.is_unknown(): return other
		return self._replace(structure=unify(self.structure, other.structure, resolve))

	def index(self, path:Iterable[int], resolve:RESOLVER=None) -> Optional[TypeStructure]:
		""" The shape found by following the path of field and slot positions. See TypeStructure.index. """
		return self.structure.index(path, resolve)

	def __str__(self): return self.name.render()

def _primitive(name:str, size:int, align:int=None) -> RustType:
	return RustType(TypeName.named(name), Primitive(name), size, size if align is None else align)

PRIMITIVES = {
	rt.name: rt for rt in [
		_primitive("i8", 1), _primitive("i16", 2), _primitive("i32", 4), _primitive("i64", 8), _primitive("i128", 16),
		_primitive("u8", 1), _primitive("u16", 2), _primitive("u32", 4), _primitive("u64", 8), _primitive("u128", 16),
		_primitive("isize", 8), _primitive("usize", 8),
		_primitive("f32", 4), _primitive("f64", 8),
		_primitive("bool", 1), _primitive("char", 4),
	]
}
