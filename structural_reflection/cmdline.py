"""
Structural subtyping and biased unification over Rust-like type shapes.

{0}

For example:

    structural-reflection name "std::vec::Vec<&'a mut Foo>"

prints the canonical spelling of a type name, or explains why it isn't one.

    structural-reflection subtype "{{x: i32, y: i32}}" "{{x: i32}}"

prints Yes, No, or Unknown.

    structural-reflection unify -c shapes.types "@Point" "?{{x: f64}}"

prints the left-biased unification, resolving names through the given catalog file.

    structural-reflection -h

will explain all the arguments.
"""
import sys, argparse

parser = argparse.ArgumentParser(
	prog="structural-reflection",
	description="Structural subtyping and biased unification over Rust-like type shapes.",
)
parser.add_argument('-v', "--verbose", action="count", default=0, help="Narrate what gets loaded and registered.")
subparsers = parser.add_subparsers(dest="command", required=True)

name_parser = subparsers.add_parser("name", help="Parse type names and print them canonically.")
name_parser.add_argument("text", nargs="+", help="One or more type names.")

for command, help_text in [
	("subtype", "Decide whether the first shape is a structural subtype of the second."),
	("unify", "Unify two shapes, biased toward the first."),
]:
	sub = subparsers.add_parser(command, help=help_text)
	sub.add_argument("lhs", help="A shape in structure notation.")
	sub.add_argument("rhs", help="Another shape in structure notation.")
	sub.add_argument('-c', "--catalog", action="append", default=[], help="A catalog file to resolve @names against. May repeat.")
	sub.add_argument('-p', "--primitives", action="store_true", help="Also pre-register the primitive and common library types.")

def run(args) -> int:
	from .diagnostics import Report, TooManyIssues
	report = Report(verbose=args.verbose)
	try:
		if args.command == "name": return _names(args, report)
		else: return _shapes(args, report)
	except TooManyIssues:
		report.complain_to_console()
		print("Giving up after a few issues. One crisis at a time, eh?", file=sys.stderr)
		return 1

def _names(args, report) -> int:
	from .grammar import parse, TypeNameParseError
	status = 0
	for i, text in enumerate(args.text):
		try: print(parse(text).render())
		except TypeNameParseError as ex:
			print(ex.illustrate(text, "argument %d"%(i+1)), file=sys.stderr)
			status = 1
	return status

def _shapes(args, report) -> int:
	from .grammar import parse_structure, TypeNameParseError
	from .catalog import TypeCatalog
	catalog = TypeCatalog.with_primitives(report) if args.primitives else TypeCatalog(report)
	for path in args.catalog:
		catalog.load(path)
	shapes = []
	for key, text in [("lhs", args.lhs), ("rhs", args.rhs)]:
		report.remember_source(key, text, key)
		try: shapes.append(parse_structure(text))
		except TypeNameParseError as ex: report.parse_error(key, ex)
	if report.sick():
		report.complain_to_console()
		return 1
	lhs, rhs = shapes
	report.info("Comparing", lhs, "with", rhs)
	if args.command == "subtype": print(catalog.is_structural_subtype_of(lhs, rhs))
	else: print(catalog.unify(lhs, rhs).render())
	return 0

def main():
	if len(sys.argv) > 1:
		sys.exit(run(parser.parse_args()))
	else:
		print(__doc__.strip().format(parser.format_usage()))
