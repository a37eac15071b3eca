import unittest

from structural_reflection.type_name import TypeName, PointerKind, Indirection, ShapeKind, DuplicateNamesInScope, UNKNOWN_NAME, render
from structural_reflection.grammar import parse, TypeNameParseError

CANONICAL = [
	"i32",
	"std::vec::Vec<i32>",
	"HashMap<String, Vec<u8>>",
	"()",
	"(i32,)",
	"(i32, bool)",
	"&str",
	"&mut Foo",
	"&'a Foo",
	"&'a mut Foo",
	"*const u8",
	"*mut u8",
	"&&mut T",
	"[u8; 4]",
	"[u8]",
	"fn()",
	"fn() -> ()",
	"fn(i32, &str) -> usize",
	"{unknown}",
	"Vec<{unknown}>",
	"`mut`::inner",
	"`has space`",
	"Option<fn(i32) -> Box<[u8]>>",
]

class RoundTripTests(unittest.TestCase):
	def test_canonical_text_survives(self):
		for text in CANONICAL:
			with self.subTest(text=text):
				name = parse(text)
				self.assertEqual(text, name.render())
				self.assertEqual(name, parse(render(name)))

	def test_formatting_normalizes(self):
		for messy, tidy in [
			("Vec < i32 , u8 >", "Vec<i32, u8>"),
			("Foo<A,>", "Foo<A>"),
			("( i32 , )", "(i32,)"),
			("(i32)", "i32"),
			("*T", "*const T"),
			("& 'a   mut T", "&'a mut T"),
			("fn ( i32 , ) -> ( )", "fn(i32) -> ()"),
			("[ u8 ; 16 ]", "[u8; 16]"),
		]:
			with self.subTest(messy=messy):
				self.assertEqual(tidy, parse(messy).render())

	def test_constructed_names_round_trip(self):
		for name in [
			TypeName.tuple_of(),
			TypeName.tuple_of(TypeName.named("a")),
			TypeName.named("odd segment", "fn"),
			TypeName.named("Foo", generic_args=[TypeName.anonymous("bottom")]).wrapped(PointerKind.SHARED, "x"),
			TypeName.function([TypeName.slice_of(TypeName.named("u8"))], TypeName.array_of(TypeName.named("u8"), 0)),
		]:
			with self.subTest(name=name):
				self.assertEqual(name, parse(name.render()))

class StructureOfNamesTests(unittest.TestCase):
	def test_parts(self):
		name = parse("&'a mut std::Foo<Bar>")
		expect = TypeName.named("std", "Foo", generic_args=[TypeName.named("Bar")]).wrapped(PointerKind.MUTABLE, "a")
		self.assertEqual(expect, name)
		self.assertEqual(ShapeKind.NAMED, name.shape_kind)
		self.assertEqual("Foo", name.simple_name)
		self.assertEqual(("std",), name.qualifier)
		self.assertEqual(TypeName.named("std", "Foo", generic_args=[TypeName.named("Bar")]), name.unwrapped())

	def test_indirection_is_outermost_first(self):
		name = parse("&*mut T")
		self.assertEqual((Indirection(PointerKind.SHARED), Indirection(PointerKind.MUT_POINTER)), name.indirection)

	def test_one_slot_tuple_needs_comma(self):
		self.assertEqual(ShapeKind.TUPLE, parse("(i32,)").shape_kind)
		self.assertEqual(ShapeKind.NAMED, parse("(i32)").shape_kind)

	def test_function_parts(self):
		name = parse("fn(A, B) -> C")
		self.assertEqual(ShapeKind.FUNCTION, name.shape_kind)
		self.assertEqual((TypeName.named("A"), TypeName.named("B")), name.elements)
		self.assertEqual(TypeName.named("C"), name.returns)
		self.assertIsNone(parse("fn(A)").returns)

	def test_anonymous(self):
		self.assertTrue(parse("{unknown}").is_anonymous())
		self.assertFalse(parse("unknown").is_anonymous())

	def test_unrepresentable_names_are_refused(self):
		with self.assertRaises(ValueError): TypeName.named()
		with self.assertRaises(ValueError): TypeName.named("a`b")
		with self.assertRaises(ValueError): TypeName.named("p").wrapped(PointerKind.CONST_POINTER, "a")
		with self.assertRaises(ValueError): TypeName.named("p").wrapped(PointerKind.SHARED, "a b")
		with self.assertRaises(ValueError): TypeName.named("p").wrapped(PointerKind.MUTABLE, "'a")
		with self.assertRaises(ValueError): TypeName.anonymous("two words")
		with self.assertRaises(ValueError): TypeName.array_of(TypeName.named("u8"), -1)

class QualifierTests(unittest.TestCase):
	NAME = parse("&std::collections::HashMap<std::string::String, Vec<my::String>>")

	def test_qualified_is_canonical(self):
		self.assertEqual("&std::collections::HashMap<std::string::String, Vec<my::String>>", self.NAME.qualified())

	def test_unqualified(self):
		self.assertEqual("&HashMap<String, Vec<String>>", self.NAME.unqualified())
		self.assertEqual("fn(Foo) -> (Bar,)", parse("fn(a::Foo) -> (b::c::Bar,)").unqualified())

	def test_display_qualifies_only_what_is_ambiguous(self):
		scope = DuplicateNamesInScope(self.NAME.simple_names())
		self.assertEqual("&HashMap<std::string::String, Vec<my::String>>", self.NAME.display(scope))
		self.assertEqual("&HashMap<String, Vec<String>>", self.NAME.display(DuplicateNamesInScope()))
		scope = DuplicateNamesInScope(["Vec"])
		scope.extend(["Vec"])
		self.assertTrue(scope.is_ambiguous("Vec"))
		self.assertFalse(scope.is_ambiguous("HashMap"))

	def test_simple_names(self):
		self.assertEqual(["HashMap", "String", "Vec", "String"], list(self.NAME.simple_names()))
		self.assertEqual(["A", "B", "C"], list(parse("fn(a::A, [B; 2]) -> C").simple_names()))
		self.assertEqual([], list(parse("({unknown},)").simple_names()))

	def test_erase_generics(self):
		self.assertEqual(parse("Vec<{unknown}>"), parse("Vec<u8>").erase_generics())
		self.assertEqual("HashMap<{unknown}, {unknown}>", parse("HashMap<K, Vec<V>>").erase_generics().render())
		plain = parse("&u8")
		self.assertIs(plain, plain.erase_generics())
		self.assertEqual(UNKNOWN_NAME, parse("Vec<u8>").erase_generics().generic_args[0])

	def test_remove_qualifier(self):
		name = parse("a::b::Foo<a::b::Bar, a::Baz, x::a::b::Qux>")
		self.assertEqual("Foo<Bar, a::Baz, x::a::b::Qux>", name.remove_qualifier(["a", "b"]).render())
		self.assertEqual("fn(Foo) -> &Bar", parse("fn(m::Foo) -> &m::Bar").remove_qualifier(("m",)).render())
		self.assertEqual(parse("Foo"), parse("Foo").remove_qualifier(()))

class ParseErrorTests(unittest.TestCase):
	def test_unterminated_generic_points_at_end(self):
		text = "Foo<Bar"
		with self.assertRaises(TypeNameParseError) as cm:
			parse(text)
		self.assertEqual(len(text), cm.exception.position)
		self.assertIsNone(cm.exception.found)
		self.assertIn("'>'", cm.exception.expected)

	def test_offending_token(self):
		for text, position, found in [
			("Foo>", 3, ">"),
			("Foo<>", 4, ">"),
			("(A, B]", 5, "]"),
			("*'a T", 1, "'a"),
			("Vec<i32> extra", 9, "extra"),
			("fn -> A", 3, "->"),
		]:
			with self.subTest(text=text):
				with self.assertRaises(TypeNameParseError) as cm:
					parse(text)
				self.assertEqual(position, cm.exception.position)
				self.assertEqual(found, cm.exception.found)

	def test_running_out(self):
		for text in ["", "&", "&mut", "(A, B", "[u8; 4", "std::", "fn(A) ->"]:
			with self.subTest(text=text):
				with self.assertRaises(TypeNameParseError) as cm:
					parse(text)
				self.assertEqual(len(text), cm.exception.position)
				self.assertIsNone(cm.exception.found)

	def test_unknown_character(self):
		with self.assertRaises(TypeNameParseError) as cm:
			parse("Foo $")
		self.assertEqual(4, cm.exception.position)
		self.assertEqual("$", cm.exception.found)

	def test_it_is_a_value_error(self):
		self.assertRaises(ValueError, parse, "Foo<")

	def test_illustration(self):
		text = "Vec<i32,,>"
		with self.assertRaises(TypeNameParseError) as cm:
			parse(text)
		picture = cm.exception.illustrate(text)
		self.assertIn(text, picture)
		self.assertIn("^", picture)
		self.assertIn("column 9", picture)

if __name__ == '__main__':
	unittest.main()
