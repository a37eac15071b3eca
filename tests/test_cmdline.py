import io, os, tempfile, unittest
from contextlib import redirect_stdout, redirect_stderr

from structural_reflection.cmdline import parser, run

def invoke(*argv):
	out, err = io.StringIO(), io.StringIO()
	with redirect_stdout(out), redirect_stderr(err):
		status = run(parser.parse_args(argv))
	return status, out.getvalue(), err.getvalue()

class NameCommandTests(unittest.TestCase):
	def test_canonical_spelling(self):
		status, out, err = invoke("name", "Vec < u8 >", "(i32)", "& 'a mut Foo")
		self.assertEqual(0, status)
		self.assertEqual(["Vec<u8>", "i32", "&'a mut Foo"], out.splitlines())
		self.assertEqual("", err)

	def test_bad_name(self):
		status, out, err = invoke("name", "i32", "Foo<")
		self.assertEqual(1, status)
		self.assertEqual("i32\n", out)
		self.assertIn("argument 2", err)
		self.assertIn("Foo<", err)

class ShapeCommandTests(unittest.TestCase):
	def test_subtype(self):
		for lhs, rhs, verdict in [
			("{x: i32, y: i32}", "{x: i32}", "Yes"),
			("{x: i32}", "{x: i32, y: i32}", "No"),
			("@Point", "{x: f64}", "Unknown"),
		]:
			with self.subTest(lhs=lhs, rhs=rhs):
				self.assertEqual((0, verdict+"\n", ""), invoke("subtype", lhs, rhs))

	def test_primitives_flag(self):
		self.assertEqual((0, "Unknown\n", ""), invoke("subtype", "@u8", "u8"))
		self.assertEqual((0, "Yes\n", ""), invoke("subtype", "-p", "@u8", "u8"))

	def test_unify_with_catalog(self):
		with tempfile.TemporaryDirectory() as folder:
			path = os.path.join(folder, "shapes.types")
			with open(path, "w", encoding="utf-8") as fh: fh.write("Point = {x: f64, y: f64};\n")
			status, out, err = invoke("unify", "-c", path, "?{x: f64}", "@Point")
		self.assertEqual(0, status)
		self.assertEqual("{x: f64, y: f64}\n", out)

	def test_verbose_narrates(self):
		status, out, err = invoke("-v", "unify", "-p", "{x: u8}", "?")
		self.assertEqual(0, status)
		self.assertEqual("{x: u8}\n", out)
		self.assertIn("Registered", err)
		self.assertIn("Comparing", err)

	def test_bad_shape(self):
		status, out, err = invoke("unify", "{x: }", "int")
		self.assertEqual(1, status)
		self.assertEqual("", out)
		self.assertIn("Parsing", err)
		self.assertIn("{x: }", err)

	def test_missing_catalog(self):
		with tempfile.TemporaryDirectory() as folder:
			status, out, err = invoke("subtype", "-c", os.path.join(folder, "nope.types"), "int", "int")
		self.assertEqual(1, status)
		self.assertEqual("", out)
		self.assertIn("Reading Files", err)

if __name__ == '__main__':
	unittest.main()
