"""
The run-time error taxonomy, and a way to tell the user about them.

Errors are raised where the trouble is detected and propagate untouched.
On the way out, each call they unwind through gets noted on the ``trail``
so that the report can say how the program got there.
"""
import sys
from typing import Any, Sequence

class ScopeError(Exception):
	""" Root of everything the evaluator raises on purpose. """
	def __init__(self, *args):
		super().__init__(*args)
		self.trail = []

	def note_call(self, call):
		self.trail.append(call)

class NameNotFoundError(ScopeError):
	def __init__(self, name:str):
		super().__init__(name)
		self.name = name
	def __str__(self): return "object '%s' not found" % self.name

class MissingArgumentError(NameNotFoundError):
	def __str__(self): return 'argument "%s" is missing, with no default' % self.name

class NotCallableError(ScopeError):
	def __init__(self, value:Any):
		super().__init__(value)
		self.value = value
	def __str__(self): return "attempt to apply non-function: %s" % _describe(self.value)

class InvalidParentError(ScopeError):
	pass

class UnusedArgumentError(ScopeError):
	def __init__(self, argument):
		super().__init__(argument)
		self.argument = argument
	def __str__(self): return "unused argument (%s)" % self.argument

class RecursivePromiseError(ScopeError):
	def __init__(self, expression):
		super().__init__(expression)
		self.expression = expression
	def __str__(self):
		return "promise already under evaluation: %s" % self.expression

class NoMethodError(ScopeError):
	def __init__(self, generic:str, classes:Sequence[str]):
		super().__init__(generic, classes)
		self.generic = generic
		self.classes = tuple(classes)
	def __str__(self):
		pattern = "no applicable method for '%s' applied to an object of class \"%s\""
		return pattern % (self.generic, self.classes[0] if self.classes else "NULL")

class ConditionError(ScopeError):
	""" What ``stop(...)`` raises. """
	def __str__(self): return str(self.args[0]) if self.args else "error"

def _describe(value):
	from .deparse import display
	return display(value)

###############################################################################

class TooManyIssues(Exception):
	pass

class Report:
	""" Collects problems for later; chats on stderr if asked to. """
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0, max_issues=10):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	@property
	def issues(self): return tuple(self._issues)

	@property
	def verbosity(self): return self._verbose

	def issue(self, it:"Pic"):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def reset(self):
		self._issues.clear()

	def info(self, *args, level=1):
		if self._verbose >= level:
			print(*args, file=sys.stderr)

	def runtime_error(self, ex:ScopeError):
		from .deparse import deparse
		intro = "Error: %s" % ex
		footer = ["  in " + deparse(call) for call in ex.trail]
		self.issue(Pic(intro, footer))

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(message)

class Pic:
	def __init__(self, intro:str, footer=()):
		self._intro, self._footer = intro, list(footer)
	def as_text(self):
		return '\n'.join([self._intro, *self._footer])

def _bemoan(issues):
	if issues:
		print("*"*60, file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
