"""
Type Names
===========

A type's name is its identity as a human would write it down:
a qualified path with generic arguments, perhaps a tuple or a function signature,
perhaps wrapped in a few layers of pointers and references.

These are plain immutable values. The grammar module turns text into these,
and the render method turns these back into text. The rendering is canonical,
so parsing a rendering gets you back the same value. (Whitespace is the one
thing that does not survive the trip, and nobody should care.)

Nothing here knows whether a named type actually exists. That's the catalog's job.
"""
import re
from enum import Enum
from collections import Counter
from typing import Callable, Iterable, Iterator, NamedTuple, Optional, Sequence

RESERVED = frozenset(["mut", "const", "fn", "enum"])
_PLAIN_SEGMENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

class PointerKind(Enum):
	CONST_POINTER = "*const "
	MUT_POINTER = "*mut "
	SHARED = "&"
	MUTABLE = "&mut "

	def is_reference(self) -> bool:
		return self in (PointerKind.SHARED, PointerKind.MUTABLE)

class ShapeKind(Enum):
	NAMED = "named"
	TUPLE = "tuple"
	FUNCTION = "function"
	ARRAY = "array"
	SLICE = "slice"
	ANONYMOUS = "anonymous"

class Indirection(NamedTuple):
	kind: PointerKind
	lifetime: Optional[str] = None

	def render(self) -> str:
		if self.lifetime is None: return self.kind.value
		if self.kind is PointerKind.SHARED: return "&'%s "%self.lifetime
		return "&'%s mut "%self.lifetime

def indirection(kind:PointerKind, lifetime:str=None) -> Indirection:
	if lifetime is not None:
		if not kind.is_reference(): raise ValueError("A raw pointer does not carry a lifetime: %r"%lifetime)
		if not _PLAIN_SEGMENT.fullmatch(lifetime): raise ValueError("A lifetime must be a plain word, not %r"%lifetime)
	return Indirection(kind, lifetime)

def _check_segment(segment:str) -> str:
	if "`" in segment:
		raise ValueError("No way to quote a path segment containing a backtick: %r"%segment)
	return segment

def render_segment(segment:str) -> str:
	if _PLAIN_SEGMENT.fullmatch(segment) and segment not in RESERVED: return segment
	return "`%s`"%segment

class TypeName(NamedTuple):
	shape_kind: ShapeKind
	path: tuple[str, ...] = ()
	generic_args: tuple["TypeName", ...] = ()
	indirection: tuple[Indirection, ...] = ()
	elements: tuple["TypeName", ...] = ()
	returns: Optional["TypeName"] = None
	length: Optional[int] = None

	@staticmethod
	def named(*path:str, generic_args:Sequence["TypeName"]=()) -> "TypeName":
		if not path: raise ValueError("A named type needs at least one path segment.")
		return TypeName(ShapeKind.NAMED, tuple(map(_check_segment, path)), tuple(generic_args))

	@staticmethod
	def tuple_of(*elements:"TypeName") -> "TypeName":
		return TypeName(ShapeKind.TUPLE, elements=elements)

	@staticmethod
	def function(params:Sequence["TypeName"], returns:"TypeName"=None) -> "TypeName":
		return TypeName(ShapeKind.FUNCTION, elements=tuple(params), returns=returns)

	@staticmethod
	def array_of(element:"TypeName", length:int) -> "TypeName":
		if length < 0: raise ValueError("Negative array length %d"%length)
		return TypeName(ShapeKind.ARRAY, elements=(element,), length=length)

	@staticmethod
	def slice_of(element:"TypeName") -> "TypeName":
		return TypeName(ShapeKind.SLICE, elements=(element,))

	@staticmethod
	def anonymous(desc:str) -> "TypeName":
		if not _PLAIN_SEGMENT.fullmatch(desc): raise ValueError("Anonymous description must be a plain word, not %r"%desc)
		return TypeName(ShapeKind.ANONYMOUS, (desc,))

	def wrapped(self, kind:PointerKind, lifetime:str=None) -> "TypeName":
		""" Put another layer of indirection around the outside. """
		return self._replace(indirection=(indirection(kind, lifetime),)+self.indirection)

	def unwrapped(self) -> "TypeName":
		return self._replace(indirection=())

	@property
	def simple_name(self) -> Optional[str]:
		if self.shape_kind is ShapeKind.NAMED: return self.path[-1]

	@property
	def qualifier(self) -> tuple[str, ...]:
		if self.shape_kind is ShapeKind.NAMED: return self.path[:-1]
		return ()

	def is_anonymous(self) -> bool:
		return self.shape_kind is ShapeKind.ANONYMOUS

	def simple_names(self) -> Iterator[str]:
		""" This name's own simple name, if it has one, then those of everything nested inside it. """
		if self.shape_kind is ShapeKind.NAMED: yield self.path[-1]
		for inner in self._inner_names(): yield from inner.simple_names()

	def _inner_names(self) -> tuple["TypeName", ...]:
		if self.returns is None: return self.generic_args + self.elements
		return self.generic_args + self.elements + (self.returns,)

	def erase_generics(self) -> "TypeName":
		"""
		Generic arguments (at this level only) become ``{unknown}``.
		That is how a catalog can hold one entry such as ``Vec<{unknown}>`` for all the vectors.
		"""
		if not self.generic_args: return self
		return self._replace(generic_args=(UNKNOWN_NAME,)*len(self.generic_args))

	def remove_qualifier(self, qualifier:Sequence[str]) -> "TypeName":
		""" Drop the given qualifier wherever it appears exactly, here and in nested names. """
		qualifier = tuple(qualifier)
		path = self.path
		if self.shape_kind is ShapeKind.NAMED and path[:-1] == qualifier: path = path[-1:]
		return self._replace(
			path=path,
			generic_args=tuple(a.remove_qualifier(qualifier) for a in self.generic_args),
			elements=tuple(e.remove_qualifier(qualifier) for e in self.elements),
			returns=None if self.returns is None else self.returns.remove_qualifier(qualifier),
		)

	def render(self, qualify:Callable[[str], bool]=None) -> str:
		"""
		Canonical text. ``qualify`` decides, per simple name, whether its qualifier gets written;
		by default every qualifier does, and only then does the text parse back to the same name.
		"""
		qualify = qualify or _always
		return "".join(i.render() for i in self.indirection) + _RENDER_SHAPE[self.shape_kind](self, qualify)

	def qualified(self) -> str: return self.render()
	def unqualified(self) -> str: return self.render(_never)

	def display(self, scope:"DuplicateNamesInScope") -> str:
		""" Qualify only those simple names which are ambiguous in the given scope. """
		return self.render(scope.is_ambiguous)

	def __str__(self): return self.render()

class DuplicateNamesInScope:
	"""
	Counts simple names, so that a listing of types can leave off qualifiers
	except where two different paths end in the same word.
	"""
	def __init__(self, names:Iterable[str]=()):
		self._counts = Counter()
		self.extend(names)

	def extend(self, names:Iterable[str]):
		self._counts.update(names)

	def is_ambiguous(self, name:str) -> bool:
		return self._counts[name] > 1

def _always(_): return True
def _never(_): return False

def render(name:TypeName) -> str:
	return name.render()

def _join(names, qualify) -> str:
	return ", ".join(n.render(qualify) for n in names)

def _render_named(name:TypeName, qualify) -> str:
	path = name.path if qualify(name.path[-1]) else name.path[-1:]
	text = "::".join(map(render_segment, path))
	if name.generic_args: text += "<%s>"%_join(name.generic_args, qualify)
	return text

def _render_tuple(name:TypeName, qualify) -> str:
	if len(name.elements) == 1: return "(%s,)"%name.elements[0].render(qualify)
	return "(%s)"%_join(name.elements, qualify)

def _render_function(name:TypeName, qualify) -> str:
	text = "fn(%s)"%_join(name.elements, qualify)
	if name.returns is not None: text += " -> " + name.returns.render(qualify)
	return text

_RENDER_SHAPE = {
	ShapeKind.NAMED: _render_named,
	ShapeKind.TUPLE: _render_tuple,
	ShapeKind.FUNCTION: _render_function,
	ShapeKind.ARRAY: lambda name, qualify: "[%s; %d]"%(name.elements[0].render(qualify), name.length),
	ShapeKind.SLICE: lambda name, qualify: "[%s]"%name.elements[0].render(qualify),
	ShapeKind.ANONYMOUS: lambda name, qualify: "{%s}"%name.path[0],
}

UNKNOWN_NAME = TypeName.anonymous("unknown")
BOTTOM_NAME = TypeName.anonymous("bottom")
