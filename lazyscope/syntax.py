"""
The three kinds of code-as-data, and a compact way to write them down in Python.

Nodes are immutable. A symbol means nothing by itself:
it gets resolved against whatever environment the evaluator is handed.
"""
from typing import Any, Optional, Sequence, Union
from .ontology import Expression

class Literal(Expression):
	__slots__ = ("_value",)
	def __init__(self, value:Any):
		object.__setattr__(self, "_value", value)
	@property
	def value(self): return self._value
	def __setattr__(self, key, value): raise AttributeError("expressions are immutable")
	def __eq__(self, other):
		return type(other) is Literal and type(other._value) is type(self._value) and other._value == self._value
	def __hash__(self): return hash((Literal, self._value))
	def __repr__(self): return "Literal(%r)" % (self._value,)

class Symbol(Expression):
	__slots__ = ("_name",)
	def __init__(self, name:str):
		assert isinstance(name, str), type(name)
		object.__setattr__(self, "_name", name)
	@property
	def name(self): return self._name
	def __setattr__(self, key, value): raise AttributeError("expressions are immutable")
	def __eq__(self, other): return type(other) is Symbol and other._name == self._name
	def __hash__(self): return hash((Symbol, self._name))
	def __repr__(self): return "Symbol(%r)" % self._name

# The empty symbol stands for a formal parameter with no default.
MISSING_ARG = Symbol("")
DOTS = "..."

OPERATOR = Union[str, Expression]

class Call(Expression):
	"""
	An operator applied to arguments.
	The operator is usually a name, but may be any expression that yields a function.
	Each argument may carry a name; ``names`` parallels ``args``.
	"""
	__slots__ = ("_op", "_args", "_names")
	def __init__(self, op:OPERATOR, args:Sequence[Expression]=(), names:Optional[Sequence[Optional[str]]]=None):
		assert isinstance(op, (str, Expression)), type(op)
		args = tuple(args)
		names = tuple(names) if names is not None else (None,) * len(args)
		assert len(names) == len(args), (names, args)
		for a in args: assert isinstance(a, Expression), a
		object.__setattr__(self, "_op", op)
		object.__setattr__(self, "_args", args)
		object.__setattr__(self, "_names", names)
	@property
	def op(self) -> OPERATOR: return self._op
	@property
	def args(self) -> tuple[Expression, ...]: return self._args
	@property
	def names(self) -> tuple[Optional[str], ...]: return self._names
	def pairs(self): return zip(self._names, self._args)
	def op_name(self) -> Optional[str]:
		return self._op if isinstance(self._op, str) else None
	def __setattr__(self, key, value): raise AttributeError("expressions are immutable")
	def __eq__(self, other):
		return (
			type(other) is Call
			and other._op == self._op
			and other._args == self._args
			and other._names == self._names
		)
	def __hash__(self): return hash((Call, self._op, self._args, self._names))
	def __repr__(self):
		if any(self._names):
			return "Call(%r, %r, %r)" % (self._op, list(self._args), list(self._names))
		return "Call(%r, %r)" % (self._op, list(self._args))

###############################################################################

def quote_of(code) -> Expression:
	"""
	Capture code without evaluating it.

	Strings are symbols, tuples are call-forms with the operator first,
	a dict inside a form supplies named arguments, and anything else is a literal.
	Use Literal("text") for a character constant.
	"""
	if isinstance(code, Expression): return code
	if isinstance(code, str): return Symbol(code)
	if isinstance(code, tuple):
		if not code: raise ValueError("An empty form has no operator.")
		head, *rest = code
		op = head if isinstance(head, str) else quote_of(head)
		args, names = [], []
		for item in rest:
			if isinstance(item, dict):
				for name, sub in item.items():
					names.append(name)
					args.append(quote_of(sub))
			else:
				names.append(None)
				args.append(quote_of(item))
		return Call(op, args, names)
	return Literal(code)

def lambda_form(params:Sequence, body) -> Call:
	""" Build the call that creates a closure: ``function(params) body`` """
	args, names = [], []
	for p in params:
		if isinstance(p, str):
			name, default = p, MISSING_ARG
		else:
			name, default = p[0], quote_of(p[1])
		names.append(name)
		args.append(default)
	args.append(quote_of(body))
	names.append(None)
	return Call("function", args, names)

def block(*steps) -> Call:
	""" Build ``{ step; step; ... }`` """
	return Call("{", [quote_of(s) for s in steps])
