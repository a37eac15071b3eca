"""
A catalog maps type names to what is known about them.

Subtyping and unification never consult a catalog directly. They take a ``resolve``
function, and a catalog happens to have one. That way tests can fabricate whatever
little world of types they like, and nobody has to share a global registry.

Catalogs can also be read from text. See the grammar module for the notation:

	# Comments run to the end of the line.
	Point = {x: f64, y: f64};
	Shape = enum {Circle {center: @Point, radius: f64}, Polygon(@Vec<Point>)};
"""
from pathlib import Path
from typing import Iterator, Optional
from .type_name import TypeName, UNKNOWN_NAME
from .structure import TypeStructure, OPAQUE
from .subtyping import IsSubtypeOf, is_structural_subtype_of
from .unification import unify
from .rust_type import RustType, PRIMITIVES
from .grammar import parse_catalog, TypeNameParseError
from .diagnostics import Report

_UNKNOWN_ARG = (UNKNOWN_NAME,)

# Library types whose insides are not worth describing, but whose names ought to resolve.
OPAQUE_LIBRARY_TYPES = [
	TypeName.named("str"),
	TypeName.named("String"),
	TypeName.named("Box", generic_args=_UNKNOWN_ARG),
	TypeName.named("Vec", generic_args=_UNKNOWN_ARG),
	TypeName.named("Option", generic_args=_UNKNOWN_ARG),
]

class TypeCatalog:
	def __init__(self, report:Report=None):
		self._report = report or Report()
		self._types = {}

	@staticmethod
	def with_primitives(report:Report=None) -> "TypeCatalog":
		catalog = TypeCatalog(report)
		for rt in PRIMITIVES.values(): catalog.register(rt)
		for name in OPAQUE_LIBRARY_TYPES: catalog.register(RustType(name, OPAQUE))
		return catalog

	def register(self, rust_type:RustType, key=None, where:slice=None) -> bool:
		"""
		Returns whether the registration stuck. Registering the same thing twice is harmless.
		Registering something different under a name already taken is an issue:
		the first definition stays, and the report hears about it.
		"""
		name = rust_type.name
		previous = self._types.get(name)
		if previous is None:
			self._types[name] = rust_type
			self._report.info("Registered", name)
			return True
		if previous != rust_type:
			self._report.conflicting_definition(name, key, where)
		return False

	def get(self, name:TypeName) -> Optional[RustType]:
		return self._types.get(name)

	def resolve(self, name:TypeName) -> Optional[TypeStructure]:
		rust_type = self._types.get(name)
		if rust_type is not None: return rust_type.structure

	def __contains__(self, name:TypeName): return name in self._types
	def __len__(self): return len(self._types)
	def __iter__(self) -> Iterator[TypeName]: return iter(self._types)

	def load_text(self, text:str, key="<text>", filename:str=None) -> bool:
		""" Returns whether the text parsed. A text with a syntax error contributes nothing. """
		self._report.remember_source(key, text, filename)
		try: declarations = parse_catalog(text)
		except TypeNameParseError as ex:
			self._report.parse_error(key, ex)
			return False
		for d in declarations:
			self.register(RustType(d.name, d.structure), key, d.where)
		self._report.info("Read %d declaration(s) from %s"%(len(declarations), filename or key))
		return True

	def load(self, path:Path) -> bool:
		path = Path(path)
		try:
			with open(path, "r", encoding="utf-8") as fh: text = fh.read()
		except OSError as ex:
			self._report.broken_file(path, ex)
			return False
		return self.load_text(text, path, str(path))

	def is_structural_subtype_of(self, sub:TypeStructure, sup:TypeStructure) -> IsSubtypeOf:
		return is_structural_subtype_of(sub, sup, self.resolve)

	def unify(self, lhs:TypeStructure, rhs:TypeStructure) -> TypeStructure:
		return unify(lhs, rhs, self.resolve)
