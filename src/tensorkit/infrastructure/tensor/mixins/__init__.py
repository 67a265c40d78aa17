"""
Tensor operation mixins.

Each subpackage contributes one group of public `Tensor` methods:

- ``indexing``   : element/view access, assignment, slicing
- ``reduction``  : norms, statistics, top-k, masked pooling
- ``structure``  : concatenation, stacking, axis insertion/removal
- ``arithmetic`` : elementwise and linear-algebra kernels

Mixins never import the concrete `Tensor`; they build results through
``type(self)`` (instance methods) or ``first.__class__`` (staticmethods).
"""
