"""
Scanning and parsing for the three little notations in this package:

type_name:
	What you'd write in a program to mention a type: ``std::vec::Vec<&'a mut Foo>``,
	``(i32, [u8; 4])``, ``fn(&str) -> usize``, and so forth.

structure:
	A way to write down a shape, mostly so that tests and catalog files stay readable:
	``{x: f64, y: f64}``, ``enum {None, Some(@T)}``, ``?{name: @String}``.

catalog:
	A sequence of declarations, each like ``Point = {x: f64, y: f64};``.

One scanner and one set of parse tables serve all three. The tables are LR(1),
because that way the parser notices a problem at the first token that can't
belong, which makes for better error messages than LALR would.
"""
import sys
from typing import NamedTuple, Optional, Sequence

from boozetools.scanning.miniscan import Definition
from boozetools.scanning.interface import ScannerBlocked
from boozetools.parsing.miniparse import MiniParse
from boozetools.parsing.interface import ParseError, SemanticError, UnexpectedTokenError, UnexpectedEndOfTextError, END_OF_TOKENS
from boozetools.support.failureprone import SourceText

from .type_name import TypeName, ShapeKind, PointerKind, RESERVED, indirection
from . import structure as S

class TypeNameParseError(ParseError):
	"""
	Where it went wrong, what would have been acceptable there, and what was there instead.
	``found`` is None if the text ended too soon.
	"""
	def __init__(self, position:int, expected:Sequence[str], found:Optional[str], message:str=None):
		self.position = position
		self.expected = tuple(expected)
		self.found = found
		if message is None:
			what = "end of input" if found is None else repr(found)
			message = "Unexpected %s at position %d"%(what, position)
			if self.expected: message += "; expected %s"%_one_of(self.expected)
		self.message = message
		super().__init__(message)

	def __str__(self): return self.message

	def width(self) -> int:
		return len(self.found) if self.found else 1

	def illustrate(self, text:str, filename:str=None) -> str:
		where = slice(self.position, self.position+self.width())
		return SourceText(text, filename=filename).complaint(where, self.message)

def _one_of(expected):
	if len(expected) == 1: return expected[0]
	return ", ".join(expected[:-1]) + " or " + expected[-1]

class _Nonsense(SemanticError):
	""" The text parsed, but it describes something that cannot exist. """

class Declaration(NamedTuple):
	name: TypeName
	structure: S.TypeStructure
	where: slice

###############################################################################
#
#  Scanner
#

_scanner = Definition("type notation")
_scanner.ignore(r'\s+')
_scanner.ignore(r'#.*')

@_scanner.on(r'::|->|[<>()\[\]\{\},;:=\&*?@]')
def _punctuation(yy):
	yy.token(sys.intern(yy.match()), yy.slice())

@_scanner.on(r'[\l_]\w*')
def _word(yy):
	text = yy.match()
	if text in RESERVED: yy.token(text, yy.slice())
	else: yy.token("word", text)

@_scanner.on(r'`[^`]*`')
def _quoted(yy):
	yy.token("word", yy.match()[1:-1])

@_scanner.on(r"'[\l_]\w*")
def _lifetime(yy):
	yy.token("lifetime", yy.match()[1:])

@_scanner.on(r'\{[\l_]\w*\}')
def _anonymous(yy):
	yy.token("anonymous", yy.match()[1:-1])

_scanner.token_map("integer", r'\d+', int)

_DESCRIBE = {
	"word": "a name",
	"lifetime": "a lifetime",
	"integer": "a number",
	"anonymous": "a placeholder like {unknown}",
	END_OF_TOKENS: "end of input",
}

def _describe(terminal:str) -> str:
	return _DESCRIBE.get(terminal, repr(terminal))

###############################################################################
#
#  Parser
#

_parser = MiniParse("type_name", "structure", "catalog", method="LR1")

def _make(constructor, *args):
	# Constructors complain with ValueError; the parse machinery wants a SemanticError.
	try: return constructor(*args)
	except ValueError as ex: raise _Nonsense(*ex.args) from None

# Type names:

@_parser.rule("type_name", ".marker .type_name")
def _wrap(marker, name:TypeName):
	return name._replace(indirection=(marker,)+name.indirection)

_parser.renaming("type_name", "bare")

@_parser.rule("marker", "&")
def _shared(_): return indirection(PointerKind.SHARED)
@_parser.rule("marker", "& mut")
def _mutable(_, __): return indirection(PointerKind.MUTABLE)
@_parser.rule("marker", "& .lifetime")
def _shared_lifetime(lifetime): return indirection(PointerKind.SHARED, lifetime)
@_parser.rule("marker", "& .lifetime mut")
def _mutable_lifetime(lifetime): return indirection(PointerKind.MUTABLE, lifetime)
@_parser.rule("marker", "*")
def _bare_pointer(_): return indirection(PointerKind.CONST_POINTER)
@_parser.rule("marker", "* const")
def _const_pointer(_, __): return indirection(PointerKind.CONST_POINTER)
@_parser.rule("marker", "* mut")
def _mut_pointer(_, __): return indirection(PointerKind.MUT_POINTER)

@_parser.rule("bare", ".path")
def _named(path): return TypeName(ShapeKind.NAMED, tuple(path))
@_parser.rule("bare", ".path < .names >")
def _generic(path, args): return TypeName(ShapeKind.NAMED, tuple(path), tuple(args))
_parser.rule("bare", ".path < .names , >")(_generic)

@_parser.rule("bare", ".paren")
def _tuple_or_group(paren):
	items, is_tuple = paren
	if is_tuple: return TypeName.tuple_of(*items)
	else: return items[0]

@_parser.rule("bare", "fn .paren")
def _function(paren): return TypeName.function(paren[0])
@_parser.rule("bare", "fn .paren -> .type_name")
def _function_returning(paren, returns): return TypeName.function(paren[0], returns)

@_parser.rule("bare", "[ .type_name ]")
def _slice_name(element): return TypeName.slice_of(element)
@_parser.rule("bare", "[ .type_name ; .integer ]")
def _array_name(element, length): return _make(TypeName.array_of, element, length)

@_parser.rule("bare", ".anonymous")
def _anonymous_name(desc): return TypeName.anonymous(desc)

@_parser.rule("path", ".word")
def _path_first(word): return [word]
@_parser.rule("path", ".path :: .word")
def _path_more(path, word):
	path.append(word)
	return path

# A trailing comma is what makes a one-element parenthesized list into a tuple.
@_parser.rule("paren", "( )")
def _empty_paren(_, __): return [], True
@_parser.rule("paren", "( .names )")
def _paren(items): return items, len(items) != 1
@_parser.rule("paren", "( .names , )")
def _paren_comma(items): return items, True

@_parser.rule("names", ".type_name")
def _first_name(name): return [name]
@_parser.rule("names", ".names , .type_name")
def _more_names(names, name):
	names.append(name)
	return names

# Structures:

# Shapes have no lifetimes.
_parser.rule("shape_marker", "&")(_shared)
_parser.rule("shape_marker", "& mut")(_mutable)
_parser.rule("shape_marker", "*")(_bare_pointer)
_parser.rule("shape_marker", "* const")(_const_pointer)
_parser.rule("shape_marker", "* mut")(_mut_pointer)

@_parser.rule("structure", ".shape_marker .structure")
def _pointer(marker, target): return S.Pointer(marker.kind, target)

@_parser.rule("structure", "?")
def _opaque(_): return S.OPAQUE
@_parser.rule("structure", "? .slots")
def _opaque_tuple(slots): return S.OpaqueTuple(slots[0])
@_parser.rule("structure", "? .fields")
def _opaque_fields(fields): return _make(S.OpaqueFields, fields)

@_parser.rule("structure", ".word")
def _primitive(name): return S.Primitive(name)
@_parser.rule("structure", ".fields")
def _struct(fields): return _make(S.Struct, fields)

@_parser.rule("structure", ".slots")
def _tuple_struct(slots):
	items, is_tuple = slots
	if is_tuple: return S.TupleStruct(items)
	else: return items[0]

@_parser.rule("structure", "enum { }")
def _empty_enum(_, __, ___): return S.Enum(())
@_parser.rule("structure", "enum { .variants }")
def _enum(variants): return _make(S.Enum, variants)
@_parser.rule("structure", "enum { .variants , }")
def _enum_comma(variants): return _make(S.Enum, variants)
@_parser.rule("structure", "enum .anonymous")
def _enum_of_one(word):
	# The scanner reads "{Foo}" as a placeholder name, but after "enum" it's one unit variant.
	return S.Enum([(word, S.UNIT)])

@_parser.rule("structure", "[ .structure ]")
def _slice(element): return S.Slice(element)
@_parser.rule("structure", "[ .structure ; .integer ]")
def _array(element, length): return _make(S.Array, element, length)

@_parser.rule("structure", "@ .type_name")
def _reference(name): return S.Named(name)

@_parser.rule("slots", "( )")
def _no_slots(_, __): return [], True
@_parser.rule("slots", "( .structures )")
def _slots(items): return items, len(items) != 1
@_parser.rule("slots", "( .structures , )")
def _slots_comma(items): return items, True

@_parser.rule("structures", ".structure")
def _first_structure(item): return [item]
@_parser.rule("structures", ".structures , .structure")
def _more_structures(items, item):
	items.append(item)
	return items

@_parser.rule("fields", "{ }")
def _no_fields(_, __): return []
@_parser.rule("fields", "{ .field_list }")
def _fields(items): return items
@_parser.rule("fields", "{ .field_list , }")
def _fields_comma(items): return items

@_parser.rule("field_list", ".field")
def _first_field(field): return [field]
@_parser.rule("field_list", ".field_list , .field")
def _more_fields(fields, field):
	fields.append(field)
	return fields

_parser.rule("field", ".word : .structure")(None)

@_parser.rule("variants", ".variant")
def _first_variant(variant): return [variant]
@_parser.rule("variants", ".variants , .variant")
def _more_variants(variants, variant):
	variants.append(variant)
	return variants

@_parser.rule("variant", ".word")
def _unit_variant(name): return name, S.UNIT
@_parser.rule("variant", ".word .slots")
def _tuple_variant(name, slots):
	# Always positional here: "Some(x)" has one slot, not a parenthesized x.
	return name, S.TupleStruct(slots[0])
@_parser.rule("variant", ".word .fields")
def _struct_variant(name, fields): return name, _make(S.Struct, fields)
_parser.rule("variant", ".word : .structure")(None)

# Catalogs:

@_parser.rule("catalog", "")
def _empty_catalog(): return []
@_parser.rule("catalog", ".catalog .declaration")
def _more_declarations(catalog, declaration):
	catalog.append(declaration)
	return catalog

@_parser.rule("declaration", ".type_name .= .structure ;")
def _declaration(name, where, body): return Declaration(name, body, where)

###############################################################################
#
#  Entry points
#

def _parse(text:str, language:str):
	scan = _scanner.scan(text)
	try:
		return _parser.parse(scan, language=language)
	except ScannerBlocked as ex:
		raise TypeNameParseError(ex.position, (), text[ex.position:ex.position+1] or None) from None
	except UnexpectedTokenError as ex:
		found = text[scan.left:scan.right]
		raise TypeNameParseError(scan.left, _expected(ex.pds), found) from None
	except UnexpectedEndOfTextError as ex:
		raise TypeNameParseError(len(text), _expected(ex.pds), None) from None
	except _Nonsense as ex:
		found = text[scan.left:scan.right] or None
		raise TypeNameParseError(scan.left, (), found, str(ex)) from None

def _expected(pds) -> list[str]:
	hfa, _ = _parser.get_hfa_and_combine()
	return sorted(map(_describe, hfa.expected_terminals_at_state(pds.state)))

def parse(text:str) -> TypeName:
	""" Text to TypeName, or else TypeNameParseError. """
	return _parse(text, "type_name")

def parse_structure(text:str) -> S.TypeStructure:
	return _parse(text, "structure")

def parse_catalog(text:str) -> list[Declaration]:
	return _parse(text, "catalog")
