import unittest

from lazyscope.environment import Environment, EMPTY, MISSING, as_environment
from lazyscope.evaluator import Promise
from lazyscope.syntax import Literal
from lazyscope.diagnostics import ScopeError, NameNotFoundError, MissingArgumentError, InvalidParentError

class EnvironmentTests(unittest.TestCase):
	""" The top-level G binds a=1; its child E1 binds b=2. """

	def setUp(self) -> None:
		self.g = Environment.top()
		self.g.bind_local("a", 1)
		self.e1 = Environment.create(self.g)
		self.e1.bind_local("b", 2)

	def test_lookup_falls_through_to_ancestors(self):
		self.assertEqual(1, self.e1.lookup("a"))
		self.assertEqual(2, self.e1.lookup("b"))

	def test_unbound_name_is_an_error(self):
		with self.assertRaises(NameNotFoundError) as cm:
			self.e1.lookup("z")
		self.assertEqual("z", cm.exception.name)

	def test_lookup_never_consults_siblings_or_children(self):
		sibling = Environment.create(self.g)
		sibling.bind_local("s", 0)
		child = Environment.create(self.e1)
		child.bind_local("c", 0)
		self.assertRaises(NameNotFoundError, self.e1.lookup, "s")
		self.assertRaises(NameNotFoundError, self.e1.lookup, "c")

	def test_local_binding_masks_and_rebinding_replaces(self):
		self.e1.bind_local("a", 5)
		self.assertEqual(5, self.e1.lookup("a"))
		self.assertEqual(1, self.g.lookup("a"))
		self.e1.bind_local("a", 6)
		self.assertEqual(6, self.e1.lookup("a"))
		self.assertEqual(["a", "b"], self.e1.names())

	def test_assign_outer_never_creates_in_the_calling_frame(self):
		self.e1.assign_outer("y", 5)
		self.assertFalse(self.e1.exists("y", include_ancestors=False))
		self.assertEqual(5, self.g.fetch("y"))

	def test_assign_outer_rebinds_the_nearest_existing_binding(self):
		middle = Environment.create(self.g)
		middle.bind_local("n", 1)
		inner = Environment.create(middle)
		inner.bind_local("n", 100)
		inner.assign_outer("n", 2)
		self.assertEqual(2, middle.fetch("n"))
		self.assertEqual(100, inner.fetch("n"))
		self.assertFalse(self.g.holds("n"))

	def test_assign_outer_does_not_reach_past_the_top_level(self):
		base = Environment(EMPTY, label="base")
		base.bind_local("print", "built in")
		g = Environment.top(base)
		Environment.create(g).assign_outer("print", 1)
		self.assertEqual(1, g.fetch("print"))
		self.assertEqual("built in", base.fetch("print"))

	def test_assign_outer_from_the_top_level_binds_there(self):
		self.g.assign_outer("q", 3)
		self.assertEqual(3, self.g.fetch("q"))

	def test_lookup_forces_promises_but_exists_does_not(self):
		promise = Promise(Literal(7), self.g)
		self.e1.bind_local("p", promise)
		self.assertTrue(self.e1.exists("p"))
		self.assertFalse(promise.forced)
		self.assertEqual(7, self.e1.lookup("p"))
		self.assertTrue(promise.forced)

	def test_exists_with_and_without_ancestors(self):
		self.assertTrue(self.e1.exists("a"))
		self.assertFalse(self.e1.exists("a", include_ancestors=False))
		self.assertFalse(self.e1.exists("z"))

	def test_missing_marker_is_an_error_on_lookup(self):
		self.e1.bind_local("m", MISSING)
		self.assertRaises(MissingArgumentError, self.e1.lookup, "m")
		self.assertTrue(self.e1.exists("m"))

	def test_where_finds_the_binding_environment(self):
		self.assertIs(self.g, self.e1.where("a"))
		self.assertIs(self.e1, self.e1.where("b"))
		self.assertIsNone(self.e1.where("z"))

	def test_unbind(self):
		self.e1.unbind("b")
		self.assertFalse(self.e1.exists("b"))
		self.assertRaises(NameNotFoundError, self.e1.unbind, "b")

	def test_top_level(self):
		self.assertIs(self.g, self.e1.top_level())
		self.assertIs(self.g, self.g.top_level())
		detached = Environment.create(EMPTY)
		self.assertIs(detached, Environment.create(detached).top_level())

	def test_parent_must_be_an_environment(self):
		self.assertRaises(InvalidParentError, Environment.create, None)
		self.assertRaises(InvalidParentError, Environment.create, {"a": 1})

	def test_reparent_refuses_cycles(self):
		grandchild = Environment.create(self.e1)
		self.assertRaises(InvalidParentError, self.g.reparent, grandchild)
		self.assertRaises(InvalidParentError, self.e1.reparent, self.e1)
		other = Environment.top()
		other.bind_local("a", "other")
		self.e1.reparent(other)
		self.assertEqual("other", self.e1.lookup("a"))

	def test_the_empty_environment(self):
		self.assertRaises(NameNotFoundError, EMPTY.lookup, "anything")
		self.assertRaises(ScopeError, EMPTY.bind_local, "x", 1)
		self.assertFalse(EMPTY.exists("x"))
		self.assertRaises(InvalidParentError, lambda: EMPTY.parent)

	def test_mapping_becomes_a_one_level_frame(self):
		env = as_environment({"k": 1}, self.e1)
		self.assertEqual(1, env.lookup("k"))
		self.assertEqual(2, env.lookup("b"))
		self.assertIs(self.e1, env.parent)
		self.assertIs(self.g, as_environment(self.g))
		self.assertIs(EMPTY, as_environment({}).parent)
		self.assertRaises(InvalidParentError, as_environment, 42)

if __name__ == '__main__':
	unittest.main()
