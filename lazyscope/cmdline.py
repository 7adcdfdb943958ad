"""
Run the scoping and laziness demonstrations from the course notes.

{0}

For example:

    lazyscope lazy-adder

runs the lazy-adder example, showing each result the way R would print it.

    lazyscope -l

lists the demonstrations, and

    lazyscope -h

will explain all the arguments.
"""
import sys, argparse

parser = argparse.ArgumentParser(
	prog="lazyscope",
	description="Demonstrations of lexical scoping, promises and substitution.",
)
parser.add_argument("demo", nargs="*", help="which demonstration(s) to run; try lazy-adder for example.")
parser.add_argument('-l', "--list", action="store_true", help="List the demonstrations and stop.")
parser.add_argument('-a', "--all", action="store_true", help="Run every demonstration in turn.")
parser.add_argument('-v', "--verbose", action="count", help="Echo each form as it runs; twice to trace every call.")

def run(args):
	from .tutorial import DEMOS
	from .diagnostics import Report
	from .executive import run_program
	if args.list:
		width = max(map(len, DEMOS))
		for name, (blurb, _) in DEMOS.items():
			print(name.ljust(width), blurb)
		return 0
	names = list(DEMOS) if args.all else args.demo
	unknown = [n for n in names if n not in DEMOS]
	if unknown:
		print("No such demonstration: %s. Try --list." % ", ".join(unknown), file=sys.stderr)
		return 2
	status = 0
	for name in names:
		blurb, script = DEMOS[name]
		print("## %s: %s" % (name, blurb))
		report = Report(verbose=args.verbose)
		run_program(script, report)
		if report.sick(): status = 1
	return status

def main():
	if len(sys.argv) > 1:
		sys.exit(run(parser.parse_args()))
	else:
		print(__doc__.strip().format(parser.format_usage()))
