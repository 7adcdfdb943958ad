"""
This is the overall control for the run-time.

A session is one global environment sitting on the shared base.
It takes code in the quote_of notation, runs it a top-level form at a time,
prints what R would print, and files any error with the report.
"""
from typing import Any, Iterable, Optional
from . import values
from .syntax import quote_of
from .environment import Environment
from .evaluator import force, evaluate
from .deparse import deparse, display
from .diagnostics import Report, ScopeError
from .primitive import BASE
from .dispatch import METHODS

# Forms whose value R returns invisibly.
INVISIBLE = frozenset(["<-", "=", "<<-", "print", "cat", "assign", "rm", "registerS3method"])

class Session:
	def __init__(self, report:Optional[Report]=None):
		self.report = report or Report(verbose=0)
		self.global_env = Environment.top(BASE)

	def run(self, code) -> Any:
		""" Evaluate one form in the global environment. Errors propagate. """
		expr = quote_of(code)
		self.report.info("> " + deparse(expr).replace("\n", "\n+ "))
		values.CALL_TRACE = self.report if self.report.verbosity >= 2 else None
		try: return force(evaluate(expr, self.global_env))
		finally: values.CALL_TRACE = None

	def run_script(self, script:Iterable) -> Any:
		"""
		Run each form in turn, printing visible results.
		An error is reported and ends the script, as it would in Rscript.
		"""
		result = None
		for code in script:
			expr = quote_of(code)
			try: result = self.run(expr)
			except ScopeError as ex:
				self.report.runtime_error(ex)
				return None
			if _visible(expr, result): print(display(result))
		return result

def _visible(expr, result) -> bool:
	op = getattr(expr, "op", None)
	if op == "if" and len(expr.args) == 2 and result is None: return False
	return not (isinstance(op, str) and op in INVISIBLE)

def run_program(script:Iterable, report:Optional[Report]=None) -> Any:
	METHODS.clear()
	session = Session(report)
	result = session.run_script(script)
	if session.report.sick(): session.report.complain_to_console()
	return result
