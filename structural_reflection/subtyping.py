"""
Structural subtyping, with a sense of humility.

The question is whether a value of one shape can safely be treated as a value of another.
Sometimes the honest answer is "I don't know" because part of the picture is opaque.
So the answer is three-valued, and the values are ordered NO < UNKNOWN < YES.
An aggregate is only as good as its weakest part, so aggregates combine by ``min``:
any NO spoils the lot, and otherwise any UNKNOWN makes the whole thing UNKNOWN.

Named references get resolved through whatever lookup the caller supplies.
While comparing the expansions of a pair of names, that same pair is assumed to hold.
That is what makes recursive types come out finite.
"""
from enum import IntEnum
from typing import Callable, Iterable, Optional
from boozetools.support.foundation import Visitor
from .type_name import TypeName
from .structure import (
	TypeStructure, Opaque, Primitive, Struct, TupleStruct, Enum, OpaqueTuple, OpaqueFields,
	Pointer, Array, Slice, Named, OPAQUE,
)

RESOLVER = Callable[[TypeName], Optional[TypeStructure]]

class IsSubtypeOf(IntEnum):
	NO = 0
	UNKNOWN = 1
	YES = 2

	def downgrade(self) -> "IsSubtypeOf":
		""" YES becomes UNKNOWN; the others stay put. """
		return min(self, IsSubtypeOf.UNKNOWN)

	def __str__(self): return self.name.capitalize()

NO, UNKNOWN, YES = IsSubtypeOf.NO, IsSubtypeOf.UNKNOWN, IsSubtypeOf.YES

def combine(results:Iterable[IsSubtypeOf]) -> IsSubtypeOf:
	return min(results, default=YES)

def resolve_nothing(name:TypeName) -> Optional[TypeStructure]:
	return None

class SubtypeChecker(Visitor):
	"""
	Dispatch is on the shape of the would-be subtype; each method then sorts out the supertype.
	Opaque and Named shapes never reach the visitor: ``check`` deals with them first.
	"""
	def __init__(self, resolve:RESOLVER=None):
		self._resolve = resolve or resolve_nothing
		self._assumed = set()

	def check(self, sub:TypeStructure, sup:TypeStructure) -> IsSubtypeOf:
		if isinstance(sub, Opaque) or isinstance(sup, Opaque): return UNKNOWN
		if isinstance(sub, Named) or isinstance(sup, Named): return self._through_names(sub, sup)
		return self.visit(sub, sup)

	def _through_names(self, sub:TypeStructure, sup:TypeStructure) -> IsSubtypeOf:
		if sub == sup: return YES
		pair = (sub, sup)
		if pair in self._assumed: return YES
		self._assumed.add(pair)
		try: return self.check(self._expand(sub), self._expand(sup))
		finally: self._assumed.discard(pair)

	def _expand(self, shape:TypeStructure) -> TypeStructure:
		if isinstance(shape, Named):
			found = self._resolve(shape.name)
			return OPAQUE if found is None else found
		return shape

	def _pairwise(self, subs, sups) -> Iterable[IsSubtypeOf]:
		return (self.check(a, b) for a, b in zip(subs, sups))

	def _fields(self, have, need) -> IsSubtypeOf:
		""" Every field the supertype needs must be present. Extras are fine. """
		return combine(self.check(have[k], v) if k in have else NO for k, v in need.items())

	@staticmethod
	def visit_Primitive(sub:Primitive, sup:TypeStructure):
		if isinstance(sup, Primitive) and sub.name == sup.name: return YES
		return NO

	def visit_Struct(self, sub:Struct, sup:TypeStructure):
		if isinstance(sup, (Struct, OpaqueFields)): return self._fields(sub.fields, sup.fields)
		return NO

	def visit_OpaqueFields(self, sub:OpaqueFields, sup:TypeStructure):
		if isinstance(sup, (Struct, OpaqueFields)):
			# Fields we don't know about might be there or might not.
			known = sub.fields
			results = (self.check(known[k], v) if k in known else UNKNOWN for k, v in sup.fields.items())
			return combine(results).downgrade()
		return NO

	def visit_TupleStruct(self, sub:TupleStruct, sup:TypeStructure):
		if isinstance(sup, TupleStruct):
			if len(sub.slots) != len(sup.slots): return NO
			return combine(self._pairwise(sub.slots, sup.slots))
		if isinstance(sup, OpaqueTuple):
			if len(sub.slots) < len(sup.slots): return NO
			return combine(self._pairwise(sub.slots, sup.slots))
		return NO

	def visit_OpaqueTuple(self, sub:OpaqueTuple, sup:TypeStructure):
		if isinstance(sup, TupleStruct):
			if len(sub.slots) > len(sup.slots): return NO
			return combine(self._pairwise(sub.slots, sup.slots)).downgrade()
		if isinstance(sup, OpaqueTuple):
			return combine(self._pairwise(sub.slots, sup.slots)).downgrade()
		return NO

	def visit_Enum(self, sub:Enum, sup:TypeStructure):
		if isinstance(sup, Enum):
			# Every variant the subtype might hold must be one the supertype can represent.
			theirs = sup.variants
			return combine(self.check(v, theirs[k]) if k in theirs else NO for k, v in sub.variants.items())
		return NO

	def visit_Pointer(self, sub:Pointer, sup:TypeStructure):
		if isinstance(sup, Pointer) and sub.kind is sup.kind: return self.check(sub.target, sup.target)
		return NO

	def visit_Array(self, sub:Array, sup:TypeStructure):
		if isinstance(sup, Array):
			if sub.length != sup.length: return NO
			return self.check(sub.element, sup.element)
		if isinstance(sup, Slice): return self.check(sub.element, sup.element)
		return NO

	def visit_Slice(self, sub:Slice, sup:TypeStructure):
		if isinstance(sup, Slice): return self.check(sub.element, sup.element)
		return NO

def is_structural_subtype_of(sub:TypeStructure, sup:TypeStructure, resolve:RESOLVER=None) -> IsSubtypeOf:
	return SubtypeChecker(resolve).check(sub, sup)
