"""
S3-style method dispatch, by way of an explicit table
keyed on (generic, class) rather than on how functions happen to be named.
"""
from typing import Any
from .ontology import Expression, Function, CLASS_KEY
from .environment import Environment
from .evaluator import force
from .diagnostics import ScopeError, NoMethodError
from . import syntax

DEFAULT = "default"

class MethodTable:
	def __init__(self):
		self._methods : dict[tuple[str, str], Function] = {}

	def register(self, generic:str, cls:str, method:Function):
		assert isinstance(method, Function), method
		self._methods[generic, cls] = method

	def find(self, generic:str, classes) -> Function:
		for cls in (*classes, DEFAULT):
			try: return self._methods[generic, cls]
			except KeyError: pass
		raise NoMethodError(generic, classes)

	def clear(self): self._methods.clear()

METHODS = MethodTable()

def class_of(value:Any) -> tuple[str, ...]:
	""" Explicit class vector if the value carries one, otherwise the implicit class. """
	if isinstance(value, dict):
		return tuple(value.get(CLASS_KEY) or ("list",))
	if value is None: return ("NULL",)
	if isinstance(value, bool): return ("logical",)
	if isinstance(value, (int, float)): return ("numeric",)
	if isinstance(value, str): return ("character",)
	if isinstance(value, Function): return ("function",)
	if isinstance(value, Environment): return ("environment",)
	if isinstance(value, syntax.Call): return ("call",)
	if isinstance(value, syntax.Symbol): return ("name",)
	if isinstance(value, Expression): return (type(value).__name__.lower(),)
	return (type(value).__name__,)

def use_method(generic:str, frame:Environment) -> Any:
	"""
	Dispatch on the first argument of the call that owns ``frame``.
	The method gets that call's own promises, so nothing is evaluated twice.
	"""
	closure = frame.function
	if closure is None:
		raise ScopeError("UseMethod called from outside a function")
	subject = None
	if closure.formals:
		first = closure.formals[0].name
		subject = force(frame.lookup(first)) if first != syntax.DOTS else _first_dot(frame)
	method = METHODS.find(generic, class_of(subject))
	return force(method.apply(frame.arguments, frame.dynamic_link))

def _first_dot(frame:Environment):
	dots = frame.lookup(syntax.DOTS)
	return force(dots[0][1]) if dots else None
