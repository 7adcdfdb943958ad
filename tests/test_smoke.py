import io
import unittest
from unittest.mock import patch

from lazyscope import cmdline
from lazyscope.tutorial import DEMOS
from lazyscope.executive import run_program
from lazyscope.diagnostics import Report

def _run_demo(name):
	report = Report()
	with patch("sys.stdout", new_callable=io.StringIO) as out:
		run_program(DEMOS[name][1], report)
	if report.sick():
		report.complain_to_console()
		assert False, "Demonstration %s failed." % name
	return out.getvalue()

class DemoSmokeTests(unittest.TestCase):
	""" Run all the demonstrations; Test for no smoke. """

	def test_every_demo_runs_clean(self):
		for name in DEMOS:
			with self.subTest(name):
				_run_demo(name)

	def test_printed_results(self):
		expected = {
			"name-masking": "[1] 3\n[1] 10\n",
			"fresh-start": "[1] 1\n[1] 1\n",
			"dynamic-lookup": "[1] 16\n[1] 21\n",
			"lazy-adder": "[1] 12\n[1] 11\n",
			"counter": "[1] 1\n[1] 2\n[1] 1\n[1] FALSE\n",
			"promises": "evaluating x\n[1] 5\n[1] 10\n",
			"defaults": '[1] "1 2"\n[1] "10 20"\n[1] "1 3"\n[1] TRUE\n[1] FALSE\n',
			"substitute": "a + b * c\ny\nx + 1\n1 + z\n[1] 3\n",
			"calling-environment": '[1] "from the caller"\n[1] "global"\n',
			"dots": '[1] "hello world"\n',
			"s3-dispatch": '[1] "one-way ANOVA over 3 groups"\n[1] "something"\n[1] "anova"\n',
		}
		self.assertEqual(set(DEMOS), set(expected))
		for name, text in expected.items():
			with self.subTest(name):
				self.assertEqual(text, _run_demo(name))

class CommandLineTests(unittest.TestCase):

	def test_list(self):
		with patch("sys.stdout", new_callable=io.StringIO) as out:
			status = cmdline.run(cmdline.parser.parse_args(["--list"]))
		self.assertEqual(0, status)
		for name in DEMOS: self.assertIn(name, out.getvalue())

	def test_unknown_demo(self):
		with patch("sys.stderr", new_callable=io.StringIO) as err:
			status = cmdline.run(cmdline.parser.parse_args(["no-such-thing"]))
		self.assertEqual(2, status)
		self.assertIn("no-such-thing", err.getvalue())

	def test_run_one(self):
		with patch("sys.stdout", new_callable=io.StringIO) as out:
			status = cmdline.run(cmdline.parser.parse_args(["dots"]))
		self.assertEqual(0, status)
		self.assertEqual('## dots: %s\n[1] "hello world"\n' % DEMOS["dots"][0], out.getvalue())

if __name__ == '__main__':
	unittest.main()
