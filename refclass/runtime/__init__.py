"""
refclass runtime: reference objects built from declarative class definitions.

  definition  validates members and captures the deferred superclass.
  chain       resolves the inheritance chain on every instantiation.
  builder     assembles public, private and super scopes and rebinds methods.
  cloner      copies instances, shallow or deep.
  meta        read-only reflection for display layers.
  analysis    networkx/pydot views of chains and scopes.
"""

from . import core as _core
from . import members as _members
from . import definition as _definition
from . import chain as _chain
from . import builder as _builder
from . import cloner as _cloner
from . import meta as _meta
from . import analysis as _analysis

from .core import *
from .members import *
from .definition import *
from .chain import *
from .builder import *
from .cloner import *
from .meta import *
from .analysis import *

__all__ = []
for module in (_core, _members, _definition, _chain, _builder, _cloner, _meta, _analysis):
    __all__.extend(getattr(module, '__all__', []))
__all__ = list(dict.fromkeys(__all__))
