"""
Environments: the canonical list-structured search.

Each environment is a frame of bindings plus a static link to its parent.
Search walks parents only; nothing ever looks at siblings or children.
The chain always ends at the one empty environment.

Call environments also remember who called them (the dynamic link)
but that link plays no part in ordinary symbol resolution.
"""
from typing import Any, Iterable, Mapping, Optional
from .ontology import Deferred
from .diagnostics import ScopeError, NameNotFoundError, MissingArgumentError, InvalidParentError

class _Missing:
	""" What a formal parameter is bound to when the caller supplied nothing and there is no default. """
	__slots__ = ()
	def __repr__(self): return "<missing>"

MISSING = _Missing()

class Environment:
	_bindings : dict[str, Any]
	_parent : "Environment"

	def __init__(self, parent:"Environment", bindings:Optional[Mapping[str, Any]]=None, *, top_level=False, label=None):
		if not isinstance(parent, Environment):
			raise InvalidParentError("An environment's parent must be an environment, not %r" % (parent,))
		self._bindings = dict(bindings or ())
		self._parent = parent
		self.is_top_level = top_level
		self.label = label
		# Filled in for call environments:
		self.dynamic_link = None
		self.function = None
		self.arguments = ()
		self.missing = frozenset()

	@classmethod
	def create(cls, parent:"Environment") -> "Environment":
		return cls(parent)

	@classmethod
	def top(cls, parent:Optional["Environment"]=None, label="R_GlobalEnv") -> "Environment":
		""" The distinguished top-level (global) environment of a session. """
		return cls(EMPTY if parent is None else parent, top_level=True, label=label)

	def __repr__(self):
		if self.label: return "<environment: %s>" % self.label
		return "<environment: %#x>" % id(self)

	@property
	def parent(self) -> "Environment": return self._parent

	def ancestors(self) -> Iterable["Environment"]:
		""" Self, then parent, then grandparent, and so on; not including the empty environment. """
		env = self
		while env is not EMPTY:
			yield env
			env = env._parent

	# Own-frame access; none of these force anything.
	def holds(self, name:str) -> bool: return name in self._bindings
	def fetch(self, name:str) -> Any: return self._bindings[name]
	def names(self) -> list[str]: return sorted(self._bindings)
	def frame(self) -> dict[str, Any]: return dict(self._bindings)

	def bind_local(self, name:str, value:Any):
		assert isinstance(name, str), name
		self._bindings[name] = value

	def unbind(self, name:str):
		try: del self._bindings[name]
		except KeyError: raise NameNotFoundError(name) from None

	def where(self, name:str) -> Optional["Environment"]:
		""" The nearest environment along the chain that binds the name, if any. """
		for env in self.ancestors():
			if name in env._bindings: return env
		return None

	def exists(self, name:str, include_ancestors:bool=True) -> bool:
		if include_ancestors: return self.where(name) is not None
		else: return name in self._bindings

	def lookup(self, name:str) -> Any:
		for env in self.ancestors():
			try: binding = env._bindings[name]
			except KeyError: continue
			return materialize(name, binding)
		raise NameNotFoundError(name)

	def top_level(self) -> "Environment":
		"""
		The designated top-level environment above (or at) this one.
		A chain with none designated treats its outermost frame as the top.
		"""
		outermost = self
		for env in self.ancestors():
			if env.is_top_level: return env
			outermost = env
		return outermost

	def assign_outer(self, name:str, value:Any):
		""" The semantics of ``<<-`` """
		top = self.top_level()
		if top is not self:
			for env in self._parent.ancestors():
				if name in env._bindings:
					env._bindings[name] = value
					return
				if env is top: break
		top._bindings[name] = value

	def reparent(self, parent:"Environment"):
		""" The semantics of ``parent.env<-`` """
		if not isinstance(parent, Environment):
			raise InvalidParentError("An environment's parent must be an environment, not %r" % (parent,))
		if self in parent.ancestors():
			raise InvalidParentError("Making %r the parent of %r would form a cycle." % (parent, self))
		self._parent = parent

	def call_depth(self) -> int:
		depth, env = 0, self
		while env.dynamic_link is not None:
			depth += 1
			env = env.dynamic_link
		return depth

class EmptyEnvironment(Environment):
	""" The end of every chain. Nothing is bound here, and nothing can be. """
	def __init__(self):
		self._bindings = {}
		self._parent = None
		self.is_top_level = False
		self.label = "R_EmptyEnv"
		self.dynamic_link = None
		self.function = None
		self.arguments = ()
		self.missing = frozenset()

	@property
	def parent(self): raise InvalidParentError("The empty environment has no parent.")
	def ancestors(self): return iter(())
	def bind_local(self, name:str, value:Any):
		raise ScopeError("cannot assign values in the empty environment")
	def assign_outer(self, name:str, value:Any):
		raise ScopeError("cannot assign values in the empty environment")
	def reparent(self, parent:"Environment"):
		raise InvalidParentError("The empty environment has no parent.")
	def top_level(self): return self

EMPTY = EmptyEnvironment()

def materialize(name:str, binding:Any) -> Any:
	if isinstance(binding, Deferred): return binding.force()
	if binding is MISSING: raise MissingArgumentError(name)
	return binding

def as_environment(where, fallback:Optional[Environment]=None) -> Environment:
	"""
	Either an environment already, or a flat mapping to be treated as
	a one-level frame whose parent is the fallback.
	"""
	if isinstance(where, Environment): return where
	if isinstance(where, Mapping):
		return Environment(EMPTY if fallback is None else fallback, where)
	raise InvalidParentError("Cannot evaluate within %r" % (where,))
