"""
The :mod:`rca_learn.exceptions` module includes all custom warnings and
error classes used across rca-learn.
"""
from numpy.linalg import LinAlgError


class InvalidInputError(ValueError):
  """Raised when the data matrix or the chunklets are unusable."""


class IndexOutOfRangeError(InvalidInputError, IndexError):

  def __init__(self, chunk_idx, index, low, high):
    err_msg = ("Chunklet {} references row {}, which is outside the valid "
               "range [{}, {}].").format(chunk_idx, index, low, high)
    self.chunk_idx = chunk_idx
    self.index = index
    super(IndexOutOfRangeError, self).__init__(err_msg)


class SingularCovarianceError(LinAlgError):

  def __init__(self, cond=None):
    if cond is None:
      detail = "it is singular"
    else:
      detail = "its condition number is {:.3g}".format(cond)
    err_msg = ("Unable to invert the average chunklet scatter matrix: {}. "
               "The chunklets are too few, too small or degenerate to "
               "estimate a full rank inner covariance; provide more or "
               "larger chunklets, or reduce the dimensionality of the "
               "input.").format(detail)
    self.cond = cond
    super(SingularCovarianceError, self).__init__(err_msg)


class NonPositiveDefiniteError(LinAlgError):

  def __init__(self, min_eigval, tol):
    err_msg = ("The inner covariance matrix is not positive definite "
               "(smallest eigenvalue {:.3g}, tolerance {:.3g}), so its "
               "inverse square root is undefined.").format(min_eigval, tol)
    self.min_eigval = min_eigval
    self.tol = tol
    super(NonPositiveDefiniteError, self).__init__(err_msg)


class ChunkletWarning(UserWarning):
  """Warns about degenerate chunklets that are accepted nonetheless."""


class CovarianceMismatchWarning(RuntimeWarning):
  """Warns when the two inner covariance estimates disagree."""
