"""
Turning code (and values) back into text.

Infix operators come out infix, with just enough parentheses
to read back the way the tree is actually built.
"""
import re
from boozetools.support.foundation import Visitor
from . import syntax
from .ontology import Expression, Function, CLASS_KEY

# operator : (precedence, right-associative)
BINARY = {
	"^": (14, True),
	":": (12, False),
	"*": (10, False), "/": (10, False),
	"+": (9, False), "-": (9, False),
	"<": (8, False), ">": (8, False), "<=": (8, False), ">=": (8, False), "==": (8, False), "!=": (8, False),
	"&": (6, False), "&&": (6, False),
	"|": (5, False), "||": (5, False),
	"~": (4, False),
	"<-": (2, True), "<<-": (2, True),
	"=": (1, True),
}
UNARY = {"-": 13, "+": 13, "!": 7}
TIGHT = frozenset(["^", ":"])
_SPECIAL_INFIX = re.compile(r"^%[^%]*%$")
_SYNTACTIC = re.compile(r"^((([A-Za-z]|[.][._A-Za-z])[._A-Za-z0-9]*)|[.])$")
RESERVED = frozenset("""
	if else repeat while function for next break in
	TRUE FALSE NULL Inf NaN NA NA_integer_ NA_real_ NA_character_
""".split())
INDENT = "    "
_ASSIGNMENT = BINARY["<-"][0]

def _precedence(op):
	if op in BINARY: return BINARY[op]
	if isinstance(op, str) and _SPECIAL_INFIX.match(op): return 11, False
	return None

def symbol_text(name:str) -> str:
	if name == "" or name == syntax.DOTS: return name
	if _SYNTACTIC.match(name) and name not in RESERVED: return name
	return "`%s`" % name.replace("`", "\\`")

def literal_text(value) -> str:
	if value is None: return "NULL"
	if value is True: return "TRUE"
	if value is False: return "FALSE"
	if isinstance(value, int): return str(value)
	if isinstance(value, float):
		if value != value: return "NaN"
		if value in (float("inf"), float("-inf")): return "Inf" if value > 0 else "-Inf"
		return "%.15g" % value
	if isinstance(value, str):
		escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").replace("\t", "\\t")
		return '"%s"' % escaped
	if isinstance(value, Expression): return deparse(value)
	if isinstance(value, dict): return _record_text(value)
	if isinstance(value, tuple): return "c(%s)" % ", ".join(map(literal_text, value))
	if hasattr(value, "as_form"): return deparse(value.as_form())
	if isinstance(value, Function): return str(value)
	return repr(value)


def _record_text(record:dict) -> str:
	parts = []
	for key, item in record.items():
		if key == CLASS_KEY: continue
		if isinstance(key, str): parts.append("%s = %s" % (symbol_text(key), literal_text(item)))
		else: parts.append(literal_text(item))
	text = "list(%s)" % ", ".join(parts)
	if CLASS_KEY in record:
		classes = record[CLASS_KEY]
		if len(classes) == 1: tag = literal_text(classes[0])
		else: tag = "c(%s)" % ", ".join(map(literal_text, classes))
		text = "structure(%s, class = %s)" % (text, tag)
	return text

class Deparser(Visitor):
	""" The second argument is the precedence of the surrounding context. """

	def visit_Literal(self, expr:syntax.Literal, context:int):
		text = literal_text(expr.value)
		if context > UNARY["-"] and text.startswith("-"): return "(%s)" % text
		return text

	def visit_Symbol(self, expr:syntax.Symbol, context:int):
		return symbol_text(expr.name)

	def visit_Call(self, expr:syntax.Call, context:int):
		op = expr.op_name()
		args = expr.args
		plain = not any(expr.names)
		if op == "function": return self._function(expr, context)
		if op == "{": return self._block(args)
		if op == "(" and len(args) == 1 and plain: return "(%s)" % self.visit(args[0], 0)
		if op == "if" and len(args) in (2, 3) and plain: return self._if(args, context)
		if op == "$" and len(args) == 2 and plain:
			return "%s$%s" % (self.visit(args[0], 15), self.visit(args[1], 15))
		if op in ("[[", "[") and args and plain:
			close = "]]" if op == "[[" else "]"
			inner = ", ".join(self.visit(a, 0) for a in args[1:])
			return "%s%s%s%s" % (self.visit(args[0], 15), op, inner, close)
		if op in UNARY and len(args) == 1 and plain:
			prec = UNARY[op]
			text = op + self.visit(args[0], prec)
			return "(%s)" % text if prec < context else text
		binary = _precedence(op)
		if binary and len(args) == 2 and plain:
			prec, right_assoc = binary
			left, right = (prec+1, prec) if right_assoc else (prec, prec+1)
			pattern = "%s%s%s" if op in TIGHT else "%s %s %s"
			text = pattern % (self.visit(args[0], left), op, self.visit(args[1], right))
			return "(%s)" % text if prec < context else text
		return "%s(%s)" % (self._operator(expr.op), self._arguments(expr))

	def _operator(self, op) -> str:
		if isinstance(op, str): return symbol_text(op)
		return self.visit(op, 15)

	def _arguments(self, expr:syntax.Call) -> str:
		parts = []
		for name, arg in expr.pairs():
			text = self.visit(arg, 0)
			parts.append(text if name is None else "%s = %s" % (symbol_text(name), text))
		return ", ".join(parts)

	def _function(self, expr:syntax.Call, context:int) -> str:
		*formals, body = expr.pairs()
		params = []
		for name, default in formals:
			if default == syntax.MISSING_ARG: params.append(symbol_text(name))
			else: params.append("%s = %s" % (symbol_text(name), self.visit(default, 0)))
		text = "function(%s) %s" % (", ".join(params), self.visit(body[1], 0))
		return "(%s)" % text if context > _ASSIGNMENT else text

	def _block(self, steps) -> str:
		lines = ["{"]
		for step in steps:
			lines.extend(INDENT + line for line in self.visit(step, 0).split("\n"))
		lines.append("}")
		return "\n".join(lines)

	def _if(self, args, context:int) -> str:
		text = "if (%s) %s" % (self.visit(args[0], 0), self.visit(args[1], 0))
		if len(args) == 3: text += " else " + self.visit(args[2], 0)
		return "(%s)" % text if context > _ASSIGNMENT else text

_DEPARSER = Deparser()

def deparse(expr:Expression) -> str:
	return _DEPARSER.visit(expr, 0)

###############################################################################

def display(value) -> str:
	""" Roughly what R's print() shows. """
	if value is None: return "NULL"
	if isinstance(value, (bool, int, float, str)): return "[1] " + literal_text(value)
	if isinstance(value, dict): return _record_display(value)
	if isinstance(value, tuple):
		return "[1] " + " ".join(map(literal_text, value)) if value else "character(0)"
	return literal_text(value)

def _record_display(record:dict) -> str:
	lines = []
	for key, item in record.items():
		if key == CLASS_KEY: continue
		lines.append("$" + symbol_text(key) if isinstance(key, str) else "[[%d]]" % key)
		lines.append(display(item))
		lines.append("")
	if CLASS_KEY in record:
		lines.append('attr(,"class")')
		lines.append("[1] " + " ".join(map(literal_text, record[CLASS_KEY])))
	return "\n".join(lines) if lines else "list()"

def plain_text(value) -> str:
	""" How cat() and paste() see a value: no quotes, no index. """
	if isinstance(value, str): return value
	if isinstance(value, Expression): return deparse(value)
	return literal_text(value)
