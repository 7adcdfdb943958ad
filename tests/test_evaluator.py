import unittest

from lazyscope.syntax import Literal, Symbol, Call, quote_of, lambda_form, block
from lazyscope.environment import Environment
from lazyscope.evaluator import Promise, evaluate, eval as eval_in
from lazyscope.values import Closure, Formal, Special
from lazyscope.primitive import BASE
from lazyscope.deparse import deparse
from lazyscope.diagnostics import (
	NameNotFoundError, MissingArgumentError, NotCallableError, UnusedArgumentError, ConditionError,
)

def _run(env, code):
	return eval_in(quote_of(code), env)

class ClosureScenarios(unittest.TestCase):

	def setUp(self) -> None:
		self.g = Environment.top(BASE)
		self.g.bind_local("a", 1)

	def test_free_variables_are_looked_up_at_call_time(self):
		outer = Environment.create(self.g)
		outer.bind_local("x", 10)
		e = Environment.create(outer)
		f = Closure((), Symbol("x"), e)
		caller = Environment.create(self.g)
		caller.bind_local("x", 99)
		self.assertEqual(10, f.apply((), caller))
		outer.bind_local("x", 20)
		self.assertEqual(20, f.apply((), caller))

	def test_end_to_end(self):
		e1 = Environment.create(self.g)
		e1.bind_local("b", 2)
		self.assertEqual(1, e1.lookup("a"))
		self.assertRaises(NameNotFoundError, e1.lookup, "z")
		f = Closure((), Call("+", [Symbol("a"), Symbol("b")]), e1)
		self.assertEqual(3, f.apply((), self.g))
		self.assertEqual(3, f())

	def test_unused_arguments_are_never_evaluated(self):
		_run(self.g, ("<-", "ten", lambda_form(["x"], 10)))
		self.assertEqual(10, _run(self.g, ("ten", ("stop", Literal("boom")))))
		_run(self.g, ("<-", "one", lambda_form(["x"], "x")))
		with self.assertRaises(ConditionError):
			_run(self.g, ("one", ("stop", Literal("boom"))))

	def test_arguments_are_evaluated_in_the_caller(self):
		_run(self.g, ("<-", "f", lambda_form(["y"], block(("<-", "a", 500), "y"))))
		self.assertEqual(1, _run(self.g, ("f", "a")))

	def test_defaults_are_evaluated_in_the_callee(self):
		_run(self.g, ("<-", "f", lambda_form([("y", "z")], block(("<-", "z", Literal("inside")), "y"))))
		self.assertEqual("inside", _run(self.g, ("f",)))

	def test_missing_argument_without_default(self):
		_run(self.g, ("<-", "f", lambda_form(["p"], "p")))
		with self.assertRaises(MissingArgumentError) as cm:
			_run(self.g, ("f",))
		self.assertEqual("p", cm.exception.name)

	def test_unused_argument(self):
		_run(self.g, ("<-", "f", lambda_form(["p"], "p")))
		self.assertRaises(UnusedArgumentError, _run, self.g, ("f", 1, 2))
		self.assertRaises(UnusedArgumentError, _run, self.g, ("f", {"q": 1}))
		self.assertRaises(UnusedArgumentError, _run, self.g, ("f", {"p": 1}, {"p": 2}))

	def test_names_first_then_positions(self):
		_run(self.g, ("<-", "f", lambda_form(["p", "q"], ("paste", "p", "q"))))
		self.assertEqual("2 1", _run(self.g, ("f", {"q": 1}, 2)))
		self.assertEqual("1 2", _run(self.g, ("f", 1, 2)))

	def test_dots_collect_the_leftovers_in_call_order(self):
		_run(self.g, ("<-", "f", lambda_form(["first", "..."], ("paste", "..."))))
		self.assertEqual("b c d", _run(self.g, ("f", Literal("a"), Literal("b"), {"sep": Literal(" ")}, Literal("c"), Literal("d"))))

	def test_dots_are_passed_along_unforced(self):
		_run(self.g, ("<-", "pick", lambda_form(["a", "b"], "a")))
		_run(self.g, ("<-", "wrap", lambda_form(["..."], ("pick", "..."))))
		self.assertEqual(7, _run(self.g, ("wrap", 7, ("stop", Literal("never")))))

	def test_calling_a_non_function(self):
		self.assertRaises(NotCallableError, _run, self.g, ("a",))

	def test_unknown_operator(self):
		with self.assertRaises(NameNotFoundError) as cm:
			_run(self.g, ("nonesuch", 1))
		self.assertEqual("nonesuch", cm.exception.name)

	def test_errors_remember_the_calls_they_pass_through(self):
		_run(self.g, ("<-", "f", lambda_form([], ("g",))))
		_run(self.g, ("<-", "g", lambda_form([], ("stop", Literal("deep")))))
		with self.assertRaises(ConditionError) as cm:
			_run(self.g, ("f",))
		trail = [deparse(call) for call in cm.exception.trail]
		self.assertEqual(['stop("deep")', "g()", "f()"], trail)

	def test_eval_in_a_mapping(self):
		expr = quote_of(("+", "a", "b"))
		self.assertEqual(12, eval_in(expr, {"a": 2, "b": 10}, self.g))
		self.assertEqual(11, eval_in(expr, {"b": 10}, self.g))
		self.assertEqual(5, eval_in(5, self.g))

	def test_enclosing_environment_is_fixed_at_creation(self):
		inner = Environment.create(self.g)
		f = _run(inner, lambda_form([], "a"))
		self.assertIs(inner, f.enclosing)
		f.apply((), Environment.create(self.g))
		self.assertIs(inner, f.enclosing)

	def test_closures_are_callable_from_python(self):
		f = _run(self.g, lambda_form(["p", ("q", 100)], ("+", "p", "q")))
		self.assertEqual(101, f(1))
		self.assertEqual(3, f(1, q=2))

	def test_operator_may_be_an_expression(self):
		expr = Call(quote_of(lambda_form(["n"], ("*", "n", 2))), [Literal(21)])
		self.assertEqual(42, evaluate(expr, self.g))
		self.assertEqual("(function(n) n * 2)(21)", deparse(expr))

	def test_formal_round_trip(self):
		f = Closure([Formal("p"), Formal("q", Literal(2))], Symbol("p"), self.g)
		self.assertEqual("function(p, q = 2) p", str(f))

	def test_promise_environment_is_the_call_site(self):
		seen = []
		def peek(caller, args):
			seen.append(args[0][1])
			return None
		self.g.bind_local("peek", Special(peek, "peek"))
		local = Environment.create(self.g)
		_run(local, ("peek", ("+", "a", 1)))
		promise = seen[0]
		self.assertIsInstance(promise, Promise)
		self.assertIs(local, promise.environment)
		self.assertEqual("a + 1", deparse(promise.expression()))

if __name__ == '__main__':
	unittest.main()
