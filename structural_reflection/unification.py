"""
Biased unification: Given two shapes, produce one that summarizes both,
but only ever promises to be compatible with the left-hand one.

The left side is in charge. Whatever the left side says about fields, slots,
and variants survives. The right side can fill in what the left side did not know
(that is what an opaque left side is for) but it cannot add requirements or take them away.

A right side that is only partly known (``?(..)`` or ``?{..}``) leaves the left side as it was.
When the two sides plainly disagree, the answer is ``OPAQUE``. This never fails.
"""
from boozetools.support.foundation import Visitor
from .structure import (
	TypeStructure, Opaque, Primitive, Struct, TupleStruct, Enum, OpaqueTuple, OpaqueFields,
	Pointer, Array, Slice, Named, OPAQUE,
)
from .subtyping import RESOLVER, resolve_nothing

_PARTIAL = (OpaqueTuple, OpaqueFields)

class Unifier(Visitor):
	"""
	Dispatch is on the left-hand shape, in the same manner as the subtype checker.
	"""
	def __init__(self, resolve:RESOLVER=None):
		self._resolve = resolve or resolve_nothing
		self._in_progress = set()

	def do(self, lhs:TypeStructure, rhs:TypeStructure) -> TypeStructure:
		if isinstance(lhs, Opaque): return rhs
		if isinstance(rhs, Opaque): return lhs
		# A partly-known right side never narrows or widens the left. Only partial-opaque left sides learn from it.
		if isinstance(rhs, _PARTIAL) and not isinstance(lhs, _PARTIAL): return lhs
		if lhs == rhs: return lhs
		if isinstance(lhs, Named) or isinstance(rhs, Named): return self._through_names(lhs, rhs)
		return self.visit(lhs, rhs)

	def _through_names(self, lhs:TypeStructure, rhs:TypeStructure) -> TypeStructure:
		pair = (lhs, rhs)
		if pair in self._in_progress: return lhs
		self._in_progress.add(pair)
		try: return self.do(self._expand(lhs), self._expand(rhs))
		finally: self._in_progress.discard(pair)

	def _expand(self, shape:TypeStructure) -> TypeStructure:
		if isinstance(shape, Named):
			found = self._resolve(shape.name)
			return OPAQUE if found is None else found
		return shape

	def _merge(self, mine, theirs) -> dict:
		""" Keep all of mine, improved by theirs where the names line up. """
		return {k: self.do(v, theirs[k]) if k in theirs else v for k, v in mine.items()}

	def _fill_in(self, known, theirs) -> dict:
		""" Take their fields, improved by what I already know, and keep what I knew besides. """
		merged = {k: self.do(known[k], v) if k in known else v for k, v in theirs.items()}
		for k, v in known.items(): merged.setdefault(k, v)
		return merged

	def _zip(self, mine, theirs) -> list:
		return [self.do(a, b) for a, b in zip(mine, theirs)]

	@staticmethod
	def visit_Primitive(lhs:Primitive, rhs:TypeStructure):
		if isinstance(rhs, Primitive) and lhs.name == rhs.name: return lhs
		return OPAQUE

	def visit_Struct(self, lhs:Struct, rhs:TypeStructure):
		if isinstance(rhs, Struct): return Struct(self._merge(lhs.fields, rhs.fields))
		return OPAQUE

	def visit_OpaqueFields(self, lhs:OpaqueFields, rhs:TypeStructure):
		if isinstance(rhs, Struct): return Struct(self._fill_in(lhs.fields, rhs.fields))
		if isinstance(rhs, OpaqueFields): return OpaqueFields(self._fill_in(lhs.fields, rhs.fields))
		return lhs

	def visit_TupleStruct(self, lhs:TupleStruct, rhs:TypeStructure):
		if isinstance(rhs, TupleStruct):
			return TupleStruct(self._zip(lhs.slots, rhs.slots) + list(lhs.slots[len(rhs.slots):]))
		return OPAQUE

	def visit_OpaqueTuple(self, lhs:OpaqueTuple, rhs:TypeStructure):
		if isinstance(rhs, TupleStruct):
			# What I know already has more slots than they have: they can't be what I am.
			if len(lhs.slots) > len(rhs.slots): return lhs
			return TupleStruct(self._zip(lhs.slots, rhs.slots) + list(rhs.slots[len(lhs.slots):]))
		if isinstance(rhs, OpaqueTuple):
			longer = lhs.slots if len(lhs.slots) > len(rhs.slots) else rhs.slots
			return OpaqueTuple(self._zip(lhs.slots, rhs.slots) + list(longer[min(len(lhs.slots), len(rhs.slots)):]))
		return lhs

	def visit_Enum(self, lhs:Enum, rhs:TypeStructure):
		if isinstance(rhs, Enum): return Enum(self._merge(lhs.variants, rhs.variants))
		return OPAQUE

	def visit_Pointer(self, lhs:Pointer, rhs:TypeStructure):
		if isinstance(rhs, Pointer) and lhs.kind is rhs.kind: return Pointer(lhs.kind, self.do(lhs.target, rhs.target))
		return OPAQUE

	def visit_Array(self, lhs:Array, rhs:TypeStructure):
		if isinstance(rhs, Array) and lhs.length == rhs.length: return Array(self.do(lhs.element, rhs.element), lhs.length)
		if isinstance(rhs, Slice): return Array(self.do(lhs.element, rhs.element), lhs.length)
		return OPAQUE

	def visit_Slice(self, lhs:Slice, rhs:TypeStructure):
		if isinstance(rhs, Slice): return Slice(self.do(lhs.element, rhs.element))
		if isinstance(rhs, Array): return Array(self.do(lhs.element, rhs.element), rhs.length)
		return OPAQUE

def unify(lhs:TypeStructure, rhs:TypeStructure, resolve:RESOLVER=None) -> TypeStructure:
	return Unifier(resolve).do(lhs, rhs)
