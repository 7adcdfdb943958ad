"""
Call-By-Need with Direct Interpretation

The generic machinery that everything needs:
promises, forcing, and the recursive walk over expressions.
Symbols resolve through the static chain; every call argument becomes
a promise over the caller's environment, forced only when somebody looks.
"""
from typing import Any, Iterable, Mapping, Optional, Union
from . import syntax
from .ontology import Deferred, Expression, Function, ARGS
from .environment import Environment, as_environment
from .diagnostics import ScopeError, NotCallableError, RecursivePromiseError

ABSENT = object()

class Promise(Deferred):
	""" An expression, the environment to evaluate it in, and eventually the result. """
	__slots__ = ("_expr", "_env", "_value", "_busy")

	def __init__(self, expr:Expression, env:Environment):
		assert isinstance(expr, Expression), type(expr)
		assert isinstance(env, Environment), type(env)
		self._expr = expr
		self._env = env
		self._value = ABSENT
		self._busy = False

	@classmethod
	def make(cls, expr:Expression, env:Environment) -> "Promise":
		return cls(expr, env)

	@classmethod
	def forced_to(cls, expr:Expression, value:Any) -> "Promise":
		""" For arguments whose value is already known, as when Python calls a closure. """
		it = cls.__new__(cls)
		it._expr, it._env, it._value, it._busy = expr, None, value, False
		return it

	def __str__(self):
		if self._value is ABSENT:
			return "<promise: %s>" % self._expr
		else:
			return str(self._value)

	@property
	def forced(self) -> bool: return self._value is not ABSENT

	@property
	def environment(self) -> Optional[Environment]:
		""" Where the expression will be evaluated; gone once the value is known. """
		return self._env

	def expression(self) -> Expression: return self._expr

	def force(self):
		if self._value is ABSENT:
			if self._busy: raise RecursivePromiseError(self._expr)
			self._busy = True
			try: value = force(evaluate(self._expr, self._env))
			finally: self._busy = False
			self._value = value
			self._env = None
		return self._value

class Dots(tuple):
	""" What ``...`` is bound to: the leftover (name, promise) pairs, still unforced. """
	def __repr__(self): return "<...: %d>" % len(self)

def force(it:Any) -> Any:
	while isinstance(it, Deferred): it = it.force()
	return it

###############################################################################

def evaluate(expr:Expression, env:Environment) -> Any:
	assert isinstance(env, Environment), type(env)
	try: fn = EVALUATE[type(expr)]
	except KeyError: raise NotImplementedError(type(expr), expr)
	return fn(expr, env)

def eval(expr:Any, where:Union[Environment, Mapping[str, Any]], fallback_env:Optional[Environment]=None) -> Any:  # NOQA
	"""
	Evaluate against an environment, or against a mapping of names
	(one frame, whose parent is the fallback environment).
	Anything that is not code evaluates to itself.
	"""
	env = as_environment(where, fallback_env)
	if isinstance(expr, Expression): return force(evaluate(expr, env))
	return expr

def _eval_literal(expr:syntax.Literal, env:Environment):
	return expr.value

def _eval_symbol(expr:syntax.Symbol, env:Environment):
	return env.lookup(expr.name)

def _eval_call(expr:syntax.Call, env:Environment):
	fn = callee(expr.op, env)
	args = tuple(promise_arguments(expr.pairs(), env))
	try: return fn.apply(args, env)
	except ScopeError as ex:
		ex.note_call(expr)
		raise

def callee(op:syntax.OPERATOR, env:Environment) -> Function:
	fn = env.lookup(op) if isinstance(op, str) else force(evaluate(op, env))
	if not isinstance(fn, Function): raise NotCallableError(fn)
	return fn

def promise_arguments(pairs:Iterable, env:Environment) -> ARGS:
	for name, arg in pairs:
		if name is None and arg == _DOTS_SYMBOL:
			yield from env.lookup(syntax.DOTS)
		else:
			yield name, Promise(arg, env)

_DOTS_SYMBOL = syntax.Symbol(syntax.DOTS)

EVALUATE = {}
for _k, _v in list(globals().items()):
	if _k.startswith("_eval_"):
		_t = _v.__annotations__["expr"]
		assert isinstance(_t, type), (_k, _t)
		EVALUATE[_t] = _v
