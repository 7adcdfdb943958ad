"""
Build the base namespace: every name a program can use without defining it.

There is one base environment per process. Each session's global environment
sits directly above it. Builtins come in two flavors:
primitives see forced values; specials see the promises and decide for themselves.
"""
import math
import operator
import sys
from typing import Optional
from . import syntax
from .ontology import Expression, Function, CLASS_KEY, ARGS
from .environment import Environment, EMPTY, materialize
from .evaluator import Promise, force, evaluate
from .evaluator import eval as eval_in
from .values import Closure, Formal, Primitive, Special
from .substitution import substitute
from .deparse import deparse, display, literal_text, plain_text
from .dispatch import METHODS, class_of, use_method
from .diagnostics import ScopeError, NameNotFoundError, ConditionError

BASE = Environment(EMPTY, label="base")

def primitive(name:str, with_env=False):
	def decorate(fn):
		BASE.bind_local(name, Primitive(fn, name, with_env=with_env))
		return fn
	return decorate

def special(name:str):
	def decorate(fn):
		BASE.bind_local(name, Special(fn, name))
		return fn
	return decorate

###############################################################################
# Arithmetic and comparison

_ABSENT = object()

def _is_number(x):
	return isinstance(x, (int, float))

def _divide(a, b):
	try: return operator.truediv(a, b)
	except ZeroDivisionError:
		if a == 0 or a != a: return math.nan
		return math.copysign(math.inf, a) * math.copysign(1, b)

def _integer_divide(a, b):
	if b == 0: return _divide(a, b)
	return operator.floordiv(a, b)

def _modulo(a, b):
	if b == 0: return math.nan
	return operator.mod(a, b)

def _power(a, b):
	if a == 0 and b < 0: return math.inf
	if a < 0 and math.isfinite(b) and b != math.floor(b): return math.nan
	return operator.pow(a, b)

def _arithmetic(binary, unary=None):
	""" Numbers and logicals only; R does not add strings. """
	def fn(a, b=_ABSENT):
		if b is _ABSENT:
			if unary is None or not _is_number(a): raise ConditionError("invalid argument to unary operator")
			return unary(a)
		if not (_is_number(a) and _is_number(b)): raise ConditionError("non-numeric argument to binary operator")
		return binary(a, b)
	return fn

PRIMITIVE_BINARY = {
	"^"   : _arithmetic(_power),
	"*"   : _arithmetic(operator.mul),
	"/"   : _arithmetic(_divide),
	"%/%" : _arithmetic(_integer_divide),
	"%%"  : _arithmetic(_modulo),
	"+"   : _arithmetic(operator.add, operator.pos),
	"-"   : _arithmetic(operator.sub, operator.neg),
	"=="  : operator.eq,
	"!="  : operator.ne,
	"<="  : operator.le,
	"<"   : operator.lt,
	">="  : operator.ge,
	">"   : operator.gt,
}
PRIMITIVE_UNARY = {
	"!" : operator.not_,
	"(" : lambda x: x,
}
for _glyph, _fn in (*PRIMITIVE_BINARY.items(), *PRIMITIVE_UNARY.items()):
	BASE.bind_local(_glyph, Primitive(_fn, _glyph))

SHORTCUT = {
	"&&": False,
	"||": True,
}

def _shortcut(glyph):
	def fn(caller:Environment, args:ARGS):
		lhs = bool(force(args[0][1]))
		if lhs == SHORTCUT[glyph]: return lhs
		return bool(force(args[1][1]))
	return fn

for _glyph in SHORTCUT:
	BASE.bind_local(_glyph, Special(_shortcut(_glyph), _glyph))

###############################################################################
# Control and assignment

@special("{")
def _block(caller:Environment, args:ARGS):
	result = None
	for _, promise in args: result = force(promise)
	return result

@special("if")
def _if(caller:Environment, args:ARGS):
	condition = force(args[0][1])
	if condition is None: raise ConditionError("argument is of length zero")
	if condition: return force(args[1][1])
	elif len(args) > 2: return force(args[2][1])

def _target_name(promise:Promise) -> str:
	target = promise.expression()
	if isinstance(target, syntax.Symbol): return target.name
	if isinstance(target, syntax.Literal) and isinstance(target.value, str): return target.value
	raise ScopeError("invalid assignment target: %s" % target)

@special("<-")
def _assign(caller:Environment, args:ARGS):
	name = _target_name(args[0][1])
	value = force(args[1][1])
	caller.bind_local(name, value)
	return value

BASE.bind_local("=", Special(_assign, "="))

@special("<<-")
def _assign_outer(caller:Environment, args:ARGS):
	name = _target_name(args[0][1])
	value = force(args[1][1])
	caller.assign_outer(name, value)
	return value

@special("function")
def _function(caller:Environment, args:ARGS):
	*params, (_, body) = args
	formals = []
	for name, promise in params:
		default = promise.expression()
		formals.append(Formal(name, None if default == syntax.MISSING_ARG else default))
	return Closure(formals, body.expression(), caller)

###############################################################################
# Code as data

@special("quote")
def _quote(caller:Environment, args:ARGS):
	return args[0][1].expression()

@special("substitute")
def _substitute(caller:Environment, args:ARGS):
	expr = args[0][1].expression()
	where = force(args[1][1]) if len(args) > 1 else caller
	return substitute(expr, where)

@primitive("deparse")
def _deparse(expr):
	return deparse(expr) if isinstance(expr, Expression) else literal_text(expr)

@primitive("eval", with_env=True)
def _eval(caller:Environment, expr, envir=None, enclos=None):
	return eval_in(expr, caller if envir is None else envir, caller if enclos is None else enclos)

@primitive("force")
def _force(x):
	return x

@special("missing")
def _missing(caller:Environment, args:ARGS):
	name = _target_name(args[0][1])
	frame = _function_frame(caller)
	if frame is None or not any(f.name == name for f in frame.function.formals):
		raise ScopeError("'missing' can only be used for arguments")
	return name in frame.missing

@special("local")
def _local(caller:Environment, args:ARGS):
	where = force(args[1][1]) if len(args) > 1 else Environment.create(caller)
	return force(evaluate(args[0][1].expression(), where))

###############################################################################
# Environments

def _function_frame(env:Environment) -> Optional[Environment]:
	""" The frame of the closure call that this environment belongs to, if any. """
	for frame in env.ancestors():
		if frame.function is not None: return frame
	return None

@special("environment")
def _environment(caller:Environment, args:ARGS):
	if not args: return caller
	fn = force(args[0][1])
	return fn.enclosing if isinstance(fn, Closure) else None

@primitive("new.env", with_env=True)
def _new_env(caller:Environment, parent=None):
	return Environment.create(caller if parent is None else parent)

@primitive("globalenv", with_env=True)
def _globalenv(caller:Environment):
	return caller.top_level()

@primitive("emptyenv")
def _emptyenv():
	return EMPTY

@primitive("baseenv")
def _baseenv():
	return BASE

@primitive("parent.frame", with_env=True)
def _parent_frame(caller:Environment, n=1):
	env = caller
	for _ in range(int(n)):
		frame = _function_frame(env)
		if frame is None: return caller.top_level()
		env = frame.dynamic_link
	return env

@primitive("parent.env")
def _parent_env(env:Environment):
	return env.parent

@primitive("get", with_env=True)
def _get(caller:Environment, x:str, envir=None, inherits=True):
	env = caller if envir is None else envir
	if inherits: return env.lookup(x)
	if env.holds(x): return materialize(x, env.fetch(x))
	raise NameNotFoundError(x)

@primitive("assign", with_env=True)
def _assign_named(caller:Environment, x:str, value, envir=None):
	(caller if envir is None else envir).bind_local(x, value)
	return value

@primitive("exists", with_env=True)
def _exists(caller:Environment, x:str, envir=None, inherits=True):
	return (caller if envir is None else envir).exists(x, include_ancestors=inherits)

@primitive("ls", with_env=True)
def _ls(caller:Environment, envir=None):
	return tuple((caller if envir is None else envir).names())

@special("rm")
def _rm(caller:Environment, args:ARGS):
	for _, promise in args: caller.unbind(_target_name(promise))

###############################################################################
# Output

@primitive("print")
def _print(x):
	print(display(x))
	return x

@primitive("cat")
def _cat(*values, sep=" "):
	sys.stdout.write(sep.join(map(plain_text, values)))

@primitive("paste")
def _paste(*values, sep=" "):
	return sep.join(map(plain_text, values))

@primitive("stop")
def _stop(*message):
	raise ConditionError("".join(map(plain_text, message)))

###############################################################################
# Records and classes

@special("list")
def _list(caller:Environment, args:ARGS):
	record = {}
	for position, (name, promise) in enumerate(args, 1):
		record[position if name is None else name] = force(promise)
	return record

@special("$")
def _dollar(caller:Environment, args:ARGS):
	record = force(args[0][1])
	if not isinstance(record, dict): raise ScopeError("$ operator is invalid for atomic vectors")
	return record.get(_target_name(args[1][1]))

@primitive("[[")
def _element(record, key):
	if not isinstance(record, dict): raise ScopeError("subscript out of bounds")
	if isinstance(key, str):
		if key in record and key != CLASS_KEY: return record[key]
	elif isinstance(key, (int, float)) and key == int(key):
		items = [v for k, v in record.items() if k != CLASS_KEY]
		if 1 <= key <= len(items): return items[int(key) - 1]
	raise ScopeError("subscript out of bounds")

@primitive("structure")
def _structure(value, **attributes):
	if not isinstance(value, dict): raise ScopeError("only records can carry attributes here")
	result = dict(value)
	if "class" in attributes:
		classes = attributes["class"]
		result[CLASS_KEY] = (classes,) if isinstance(classes, str) else tuple(classes)
	return result

@primitive("class")
def _class(x):
	return class_of(x)

@primitive("inherits")
def _inherits(x, what):
	return what in class_of(x)

@primitive("UseMethod", with_env=True)
def _use_method(caller:Environment, generic:str):
	frame = _function_frame(caller)
	if frame is None: raise ScopeError("UseMethod called from outside a function")
	return use_method(generic, frame)

@primitive("registerS3method")
def _register_method(genname:str, cls:str, method:Function):
	METHODS.register(genname, cls, method)

@primitive("identical")
def _identical(x, y):
	""" Integers and doubles are one numeric type, as R sees them. """
	return _mode(x) is _mode(y) and x == y

def _mode(value):
	return float if type(value) is int else type(value)
