"""
Keeping track of what went wrong, and explaining it to a human afterward.

Issues are collected rather than thrown, so that one bad declaration in a catalog
does not hide the next three. Each issue remembers which text it came from
(a file path, or some made-up key for text that arrived some other way)
so the console report can quote the offending line.
"""
import sys
from typing import Hashable
from boozetools.support.failureprone import Issue, Evidence, Severity, SourceText

class TooManyIssues(Exception):
	pass

class Report:
	""" A place to put issues, plus a bit of chatter for verbose mode. """
	issues : list[Issue]

	def __init__(self, *, verbose:int=0, max_issues=10):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._max_issues = max_issues
		self._sources = {}
		self.issues = []

	def ok(self): return not self.issues
	def sick(self): return bool(self.issues)

	def issue(self, it:Issue):
		self.issues.append(it)
		if len(self.issues) == self._max_issues:
			raise TooManyIssues(self)

	def reset(self):
		self.issues.clear()

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def remember_source(self, key:Hashable, text:str, filename:str=None):
		""" So that later complaints about this text can quote it. """
		self._sources[key] = SourceText(text, filename=filename)

	def _fetch(self, key) -> SourceText:
		return self._sources.get(key) or SourceText("")

	# Methods the grammar and catalog are likely to call:

	def parse_error(self, key:Hashable, ex):
		""" Takes a TypeNameParseError """
		where = slice(ex.position, ex.position + ex.width())
		evidence = {key: [Evidence(where, "confused here")]}
		self.issue(Issue("Parsing", Severity.ERROR, ex.message, evidence))

	def conflicting_definition(self, name, key:Hashable=None, where:slice=None):
		description = "%s is already registered with a different definition. Keeping the first one."%(name,)
		evidence = {key: [Evidence(where, "redefined here")]} if where is not None else {}
		self.issue(Issue("Registering Types", Severity.ERROR, description, evidence))

	def broken_file(self, path, cause:Exception):
		description = "Something went pear-shaped while trying to read %s: %s"%(path, cause)
		self.issue(Issue("Reading Files", Severity.ERROR, description, {}))

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		for it in self.issues:
			it.emit(self._fetch)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self.issues:
			self.complain_to_console()
			raise AssertionError(message)
