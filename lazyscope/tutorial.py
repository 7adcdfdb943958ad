"""
Worked examples from the course notes on scoping, closures and laziness,
written in the quote_of notation: strings are names, tuples are calls,
and Literal("...") is a character constant.
"""
from .syntax import Literal, lambda_form, block

NAME_MASKING = [
	("<-", "x", 10),
	("<-", "f", lambda_form([], block(
		("<-", "x", 1),
		("<-", "y", 2),
		("+", "x", "y"),
	))),
	("f",),
	"x",
]

FRESH_START = [
	("<-", "j", lambda_form([], block(
		("if", ("!", ("exists", Literal("a"), {"inherits": False})),
			("<-", "a", 1),
			("<-", "a", ("+", "a", 1))),
		"a",
	))),
	("j",),
	("j",),
]

DYNAMIC_LOOKUP = [
	("<-", "f", lambda_form([], ("+", "x", 1))),
	("<-", "x", 15),
	("f",),
	("<-", "x", 20),
	("f",),
]

LAZY_ADDER = [
	("<-", "add", lambda_form(["x"], lambda_form(["y"], ("+", "x", "y")))),
	("<-", "x", 1),
	("<-", "adder", ("add", "x")),
	("<-", "x", 2),
	("adder", 10),
	("<-", "add_forced", lambda_form(["x"], block(
		("force", "x"),
		lambda_form(["y"], ("+", "x", "y")),
	))),
	("<-", "x", 1),
	("<-", "adder", ("add_forced", "x")),
	("<-", "x", 2),
	("adder", 10),
]

COUNTER = [
	("<-", "new_counter", lambda_form([], block(
		("<-", "i", 0),
		lambda_form([], block(
			("<<-", "i", ("+", "i", 1)),
			"i",
		)),
	))),
	("<-", "counter_one", ("new_counter",)),
	("<-", "counter_two", ("new_counter",)),
	("counter_one",),
	("counter_one",),
	("counter_two",),
	("exists", Literal("i")),
]

PROMISES = [
	("<-", "thrice", lambda_form(["x"], block("x", "x", "x"))),
	("thrice", block(("cat", Literal("evaluating x\n")), 5)),
	("<-", "ten", lambda_form(["x"], 10)),
	("ten", ("stop", Literal("this is never evaluated"))),
]

DEFAULTS = [
	("<-", "h", lambda_form([("a", 1), ("b", ("*", "a", 2))], ("paste", "a", "b"))),
	("h",),
	("h", 10),
	("h", {"b": 3}),
	("<-", "i", lambda_form(["a", "b"], ("missing", "b"))),
	("i", 1),
	("i", 1, 2),
]

SUBSTITUTE = [
	("<-", "f", lambda_form(["x"], ("substitute", "x"))),
	("f", ("+", "a", ("*", "b", "c"))),
	("<-", "g", lambda_form(["y"], ("f", "y"))),
	("g", ("+", "a", "b")),
	("<-", "x", 1),
	("substitute", ("+", "x", 1)),
	("substitute", ("+", "a", "b"), ("list", {"a": 1, "b": ("quote", "z")})),
	("eval", ("quote", ("+", "a", "b")), ("list", {"a": 1, "b": 2})),
]

CALLING_ENVIRONMENT = [
	("<-", "peek", lambda_form([], ("get", Literal("x"), {"envir": ("parent.frame",)}))),
	("<-", "caller", lambda_form([], block(
		("<-", "x", Literal("from the caller")),
		("peek",),
	))),
	("<-", "x", Literal("global")),
	("caller",),
	("peek",),
]

DOTS = [
	("<-", "inner", lambda_form(["a", "b"], ("paste", "a", "b"))),
	("<-", "wrapper", lambda_form(["..."], ("inner", "..."))),
	("wrapper", {"b": Literal("world")}, Literal("hello")),
]

S3_DISPATCH = [
	("<-", "describe", lambda_form(["x"], ("UseMethod", Literal("describe")))),
	("registerS3method", Literal("describe"), Literal("default"), lambda_form(["x"], Literal("something"))),
	("registerS3method", Literal("describe"), Literal("anova"), lambda_form(["x"],
		("paste", Literal("one-way ANOVA over"), ("$", "x", "groups"), Literal("groups")),
	)),
	("<-", "fit", ("structure", ("list", {"groups": 3}), {"class": Literal("anova")})),
	("describe", "fit"),
	("describe", 42),
	("class", "fit"),
]

DEMOS = {
	"name-masking": ("Names defined inside a function mask names defined outside.", NAME_MASKING),
	"fresh-start": ("Every call gets a new environment; nothing carries over.", FRESH_START),
	"dynamic-lookup": ("Free variables are looked up when the function runs, not when it is made.", DYNAMIC_LOOKUP),
	"lazy-adder": ("An argument is a promise until something forces it.", LAZY_ADDER),
	"counter": ("<<- rebinds a name in an enclosing environment.", COUNTER),
	"promises": ("Promises are evaluated at most once, and only if used.", PROMISES),
	"defaults": ("Default arguments are promises evaluated inside the function.", DEFAULTS),
	"substitute": ("substitute() recovers the code behind a promise; at top level it is quote().", SUBSTITUTE),
	"calling-environment": ("parent.frame() gives the caller's environment, for deliberate dynamic scoping.", CALLING_ENVIRONMENT),
	"dots": ("... passes arguments along without forcing them.", DOTS),
	"s3-dispatch": ("UseMethod() picks a method by the class of the first argument.", S3_DISPATCH),
}
