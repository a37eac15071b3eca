"""
Type Structures
================

These values describe the *shape* of a type: what fields it has, what variants,
how many positional slots, where the pointers go. Two types with different names
may still have compatible shapes, and that is the whole point of this package.

Some shapes are not fully known. An ``Opaque`` knows nothing at all.
An ``OpaqueTuple`` knows it is positional and perhaps what the first few slots hold.
An ``OpaqueFields`` knows it has named fields and perhaps what a few of them are.
Subtyping and unification treat these as wildcards, with varying degrees of humility.

The values are immutable and finite. Recursive types go through a ``Named``
reference, which somebody else (usually a catalog) knows how to resolve.

Equality and hashing work the same way as in a type-checker: every value gets
classified into a type-number, so comparisons stay cheap even for big trees.
"""
from typing import Callable, Iterable, Mapping, Optional, Union
from types import MappingProxyType
from boozetools.support.foundation import EquivalenceClassifier
from .type_name import TypeName, PointerKind, render_segment

_structure_numbering = EquivalenceClassifier()

class TypeStructure:
	""" Value objects so they can play well with the classifier """
	def __init__(self, *key):
		self._key = key
		self._hash = hash(key)
		self.number = _structure_numbering.classify(self)
	def __hash__(self): return self._hash
	def __eq__(self, other): return type(self) is type(other) and self._key == other._key
	def __repr__(self): return self.render()

	def render(self) -> str: raise NotImplementedError(type(self))
	def children(self) -> Iterable["TypeStructure"]: return ()
	def is_opaque_free(self) -> bool:
		return all(child.is_opaque_free() for child in self.children())

	def child_at(self, index:int) -> Optional["TypeStructure"]:
		""" The field, slot, or element in that position, if there is one. Fields count in declaration order. """
		return None

	def index(self, path:Iterable[int], resolve:Callable[[TypeName], Optional["TypeStructure"]]=None) -> Optional["TypeStructure"]:
		"""
		Follow a path of positions down into nested fields, slots, and elements.
		Named references along the way are expanded through ``resolve`` if one is given.
		The answer is None as soon as some step has nowhere to go.
		"""
		shape = self
		for i in path:
			seen = set()
			while isinstance(shape, Named) and resolve is not None and shape not in seen:
				seen.add(shape)
				shape = resolve(shape.name)
				if shape is None: return None
			shape = shape.child_at(i)
			if shape is None: return None
		return shape

FieldSpec = Union[Mapping[str, TypeStructure], Iterable[tuple[str, TypeStructure]]]

def _ordered_mapping(items:FieldSpec, what:str) -> Mapping[str, TypeStructure]:
	pairs = list(items.items() if isinstance(items, Mapping) else items)
	mapping = dict(pairs)
	if len(mapping) != len(pairs):
		seen = set()
		for name, _ in pairs:
			if name in seen: raise ValueError("%s %r appears twice"%(what, name))
			seen.add(name)
	for name, child in pairs:
		assert isinstance(child, TypeStructure), (name, child)
	return MappingProxyType(mapping)

def _mapping_key(mapping:Mapping[str, TypeStructure]):
	return tuple(mapping.items())

def _render_fields(fields:Mapping[str, TypeStructure]) -> str:
	return "{%s}"%", ".join("%s: %s"%(render_segment(k), v.render()) for k,v in fields.items())

def _render_slots(slots) -> str:
	if len(slots) == 1: return "(%s,)"%slots[0].render()
	return "(%s)"%", ".join(s.render() for s in slots)

def _nth(items, index:int):
	items = tuple(items)
	if 0 <= index < len(items): return items[index]

class Opaque(TypeStructure):
	def __init__(self): super().__init__()
	def render(self): return "?"
	def is_opaque_free(self): return False

OPAQUE = Opaque()

class Primitive(TypeStructure):
	def __init__(self, name:str):
		self.name = name
		super().__init__(name)
	def render(self): return render_segment(self.name)

class Struct(TypeStructure):
	""" Named-field aggregate. Field order is kept but does not matter to subtyping. """
	def __init__(self, fields:FieldSpec=()):
		self.fields = _ordered_mapping(fields, "Field")
		super().__init__(_mapping_key(self.fields))
	def render(self): return _render_fields(self.fields)
	def children(self): return self.fields.values()
	def child_at(self, index): return _nth(self.fields.values(), index)

class TupleStruct(TypeStructure):
	def __init__(self, slots:Iterable[TypeStructure]=()):
		self.slots = tuple(slots)
		super().__init__(self.slots)
	def render(self): return _render_slots(self.slots)
	def children(self): return self.slots
	def child_at(self, index): return _nth(self.slots, index)

UNIT = TupleStruct()

class Enum(TypeStructure):
	"""
	Each variant is associated with a Struct, a TupleStruct, or UNIT. (Normally, anyway.)
	Variants are a set: declaration order is kept for rendering but does not affect equality.
	"""
	def __init__(self, variants:FieldSpec):
		self.variants = _ordered_mapping(variants, "Variant")
		super().__init__(frozenset(self.variants.items()))
	def render(self):
		return "enum {%s}"%", ".join(_render_variant(k, v) for k,v in self.variants.items())
	def children(self): return self.variants.values()
	def child_at(self, index):
		# Only a single-variant enum has a layout to index into.
		if len(self.variants) == 1: return next(iter(self.variants.values())).child_at(index)

def _render_variant(name:str, body:TypeStructure) -> str:
	name = render_segment(name)
	if body == UNIT: return name
	if isinstance(body, Struct): return name+" "+body.render()
	if isinstance(body, TupleStruct): return "%s(%s)"%(name, ", ".join(s.render() for s in body.slots))
	# Unification can leave a variant with some other shape, typically opaque.
	return "%s: %s"%(name, body.render())

class OpaqueTuple(TypeStructure):
	""" Positional, but the slot count is unresolved. Whatever leading slots are known, are carried. """
	def __init__(self, slots:Iterable[TypeStructure]=()):
		self.slots = tuple(slots)
		super().__init__(self.slots)
	def render(self): return "?"+_render_slots(self.slots)
	def children(self): return self.slots
	def child_at(self, index): return _nth(self.slots, index)
	def is_opaque_free(self): return False

class OpaqueFields(TypeStructure):
	""" Named fields, but the set is unresolved. Known fields still have to match. """
	def __init__(self, fields:FieldSpec=()):
		self.fields = _ordered_mapping(fields, "Field")
		super().__init__(_mapping_key(self.fields))
	def render(self): return "?"+_render_fields(self.fields)
	def children(self): return self.fields.values()
	def child_at(self, index): return _nth(self.fields.values(), index)
	def is_opaque_free(self): return False

class Pointer(TypeStructure):
	def __init__(self, kind:PointerKind, target:TypeStructure):
		assert isinstance(kind, PointerKind), kind
		self.kind, self.target = kind, target
		super().__init__(kind, target)
	def render(self): return self.kind.value + self.target.render()
	def children(self): return (self.target,)

class Array(TypeStructure):
	def __init__(self, element:TypeStructure, length:int):
		if length < 0: raise ValueError("Negative array length %d"%length)
		self.element, self.length = element, length
		super().__init__(element, length)
	def render(self): return "[%s; %d]"%(self.element.render(), self.length)
	def children(self): return (self.element,)
	def child_at(self, index):
		if 0 <= index < self.length: return self.element

class Slice(TypeStructure):
	def __init__(self, element:TypeStructure):
		self.element = element
		super().__init__(element)
	def render(self): return "[%s]"%self.element.render()
	def children(self): return (self.element,)
	def child_at(self, index):
		if index >= 0: return self.element

class Named(TypeStructure):
	""" A level of indirection through the catalog. This is how a type gets to mention itself. """
	def __init__(self, name:TypeName):
		assert isinstance(name, TypeName), name
		self.name = name
		super().__init__(name)
	def render(self): return "@"+self.name.render()
