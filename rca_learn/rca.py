"""
Relevant Components Analysis (RCA)
"""

from collections import namedtuple
import numbers
import warnings

import numpy as np
from scipy.linalg import eigh, inv, svdvals
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils.validation import check_consistent_length

from ._util import (check_input, make_context, _check_pd_from_eigen,
                    _symmetrize)
from .base_metric import MahalanobisMixin
from .chunklets import check_chunklets
from .constraints import Constraints
from .exceptions import (ChunkletWarning, CovarianceMismatchWarning,
                         SingularCovarianceError)

__all__ = ['RCA', 'RCA_Supervised', 'RCAResult', 'rca', 'center_chunklets',
           'inner_covariance', 'chunklet_scatter', 'inv_sqrtm']


RCAResult = namedtuple('RCAResult', ['B', 'A', 'newX'])
RCAResult.__doc__ = """Result of `rca`.

B : `numpy.ndarray`, shape=(n_features, n_features)
  The Mahalanobis matrix. Distances between points x1, x2 are given by
  ``(x2 - x1).dot(B).dot(x2 - x1)``.
A : `numpy.ndarray`, shape=(n_features, n_features)
  The whitening transformation, such that ``A.T.dot(A) == B``.
newX : `numpy.ndarray`, shape=(n_samples, n_features)
  The data transformed by ``A``.
"""


def center_chunklets(X, chunks):
  """Mean centers each chunklet separately.

  Parameters
  ----------
  X : `numpy.ndarray`, shape=(n_samples, n_features)
    The data matrix, as floats.

  chunks : `ChunkletCollection`
    Chunklets whose indices were checked against ``X``.

  Returns
  -------
  centered : list of `numpy.ndarray`
    One (chunklet_size, n_features) array per chunklet, in order, holding the
    chunklet's rows minus the chunklet's own mean.
  """
  centered = []
  for positions in chunks.positions():
    chunk_data = X[positions]
    centered.append(chunk_data - chunk_data.mean(axis=0))
  return centered


def inner_covariance(centered):
  """Population covariance of the stacked centered chunklets"""
  stacked = np.vstack(centered)
  # atleast_2d is necessary to deal with scalar covariance matrices
  return np.atleast_2d(np.cov(stacked, rowvar=False, bias=True))


def chunklet_scatter(centered, n_memberships=None):
  """Sum of the chunklets scatter matrices, divided by the total number of
  memberships ``p``.

  Each centered chunklet has zero mean, so this is equal to
  `inner_covariance` of the same chunklets.
  """
  if n_memberships is None:
    n_memberships = sum(c.shape[0] for c in centered)
  scatter = sum(c.T.dot(c) for c in centered)
  return np.atleast_2d(scatter / n_memberships)


def inv_sqrtm(M, tol=None):
  """Computes M^(-1/2) for a symmetric positive definite matrix M.

  Parameters
  ----------
  M : `numpy.ndarray`, shape=(d, d)
    Symmetric matrix.

  tol : positive `float`, optional
    Eigenvalues of `M` not larger than tol make `M` non positive definite.
    If tol is None, it is set to abs(w).max() * d * eps, with w the
    eigenvalues of M.

  Returns
  -------
  M_inv_sqrt : `numpy.ndarray`, shape=(d, d)
    The symmetric positive definite inverse square root of M.

  Raises
  ------
  NonPositiveDefiniteError
    If `M` has an eigenvalue not larger than the tolerance.
  """
  vals, vecs = eigh(M, check_finite=False)
  _check_pd_from_eigen(vals, tol)
  return _symmetrize((vecs / np.sqrt(vals)).dot(vecs.T))


def _inverse(M, max_condition=None):
  """Inverts M, refusing to do so when M is (numerically) singular"""
  s = svdvals(M, check_finite=False)
  if max_condition is None:
    max_condition = 1. / np.finfo(M.dtype).eps
  if s[-1] <= 0:
    raise SingularCovarianceError()
  cond = s[0] / s[-1]
  if cond > max_condition:
    raise SingularCovarianceError(cond)
  return _symmetrize(inv(M, check_finite=False))


def _check_params(max_condition, tol):
  if max_condition is not None and (
          not isinstance(max_condition, numbers.Real) or
          not max_condition > 1):
    raise ValueError("max_condition should be a number larger than 1, or "
                     "None. Got {} instead.".format(max_condition))
  if tol is not None and (not isinstance(tol, numbers.Real) or
                          not tol >= 0):
    raise ValueError("tol should be a non negative number, or None. "
                     "Got {} instead.".format(tol))


def _rca(X, chunks, index_base=1, max_condition=None, tol=None,
         estimator=None):
  """Runs RCA on a checked float data matrix. Returns the Mahalanobis
  matrix, the whitening transformation, the inner covariance and the
  chunklet collection that was used."""
  _check_params(max_condition, tol)
  chunks = check_chunklets(chunks, X.shape[0], index_base=index_base)

  n_singletons = chunks.n_singletons
  if n_singletons:
    warnings.warn('{} of the {} chunklets given{} have a single member and '
                  'do not contribute to the inner covariance estimate.'
                  .format(n_singletons, len(chunks), make_context(estimator)),
                  ChunkletWarning)

  centered = center_chunklets(X, chunks)
  inner_cov = inner_covariance(centered)
  hat_c = chunklet_scatter(centered, chunks.n_memberships)
  if not np.allclose(inner_cov, hat_c, rtol=1e-7,
                     atol=1e-12 * np.abs(hat_c).max()):
    warnings.warn('The inner covariance matrix and the average chunklet '
                  'scatter matrix differ by up to {:.3g}; the results may '
                  'be inaccurate.'.format(np.abs(inner_cov - hat_c).max()),
                  CovarianceMismatchWarning)

  B = _inverse(hat_c, max_condition)
  A = inv_sqrtm(inner_cov, tol)
  return B, A, inner_cov, chunks


def rca(X, chunks, index_base=1, max_condition=None, tol=None):
  """Relevant Components Analysis of ``X`` under the given chunklets.

  Parameters
  ----------
  X : array-like, shape=(n_samples, n_features)
    Each row corresponds to a single instance.

  chunks : `ChunkletCollection`, sequence of sequences of ints, or array-like
    of ints of shape (n_samples,)
    The chunklets, i.e. groups of row indices of points believed to share
    a label. See `rca_learn.chunklets.check_chunklets` for the accepted
    formats.

  index_base : {0, 1}, optional (default=1)
    Index of the first row of ``X`` in ``chunks``. A `ChunkletCollection`
    must carry the same index base.

  max_condition : float or None, optional (default=None)
    Largest condition number of the average chunklet scatter matrix that is
    accepted. If None, 1 / eps of the data type is used.

  tol : float or None, optional (default=None)
    Eigenvalues of the inner covariance matrix not larger than tol make it
    non positive definite. If None, a tolerance relative to the largest
    eigenvalue is used.

  Returns
  -------
  result : `RCAResult`
    The named tuple ``(B, A, newX)``.

  Raises
  ------
  ValueError
    If ``index_base`` is not 0 or 1, or does not match the index base of a
    `ChunkletCollection`.

  InvalidInputError
    If ``X`` is empty or not finite, or if ``chunks`` is empty.

  IndexOutOfRangeError
    If a chunklet references a row that ``X`` does not have.

  SingularCovarianceError
    If the average chunklet scatter matrix cannot be inverted.

  NonPositiveDefiniteError
    If the inner covariance matrix is not positive definite.

  Examples
  --------
  >>> from rca_learn import rca
  >>> B, A, newX = rca([[0.], [1.], [2.], [3.]], [[1, 2], [3, 4]])
  >>> B
  array([[4.]])
  >>> newX.ravel()
  array([0., 2., 4., 6.])
  """
  X = check_input(X, type_of_inputs='classic', dtype=np.float64,
                  estimator='rca')
  B, A, _, _ = _rca(X, chunks, index_base=index_base,
                    max_condition=max_condition, tol=tol)
  return RCAResult(B, A, X.dot(A))


class RCA(MahalanobisMixin, TransformerMixin, BaseEstimator):
  """Relevant Components Analysis (RCA)

  RCA learns a full rank Mahalanobis distance metric based on a weighted sum of
  in-chunklets covariance matrices. It applies a global linear transformation
  to assign large weights to relevant dimensions and low weights to irrelevant
  dimensions. Those relevant dimensions are estimated using "chunklets",
  subsets of points that are known to belong to the same class.

  Parameters
  ----------
  index_base : {0, 1}, optional (default=1)
    Index of the first row of the data in the chunklets given to `fit`. A
    `ChunkletCollection` given to `fit` must carry the same index base.

  max_condition : float or None, optional (default=None)
    Largest accepted condition number of the average chunklet scatter
    matrix. If None, 1 / eps of the data type is used.

  tol : float or None, optional (default=None)
    Positivity tolerance on the eigenvalues of the inner covariance matrix.
    If None, a tolerance relative to the largest eigenvalue is used.

  Examples
  --------
  >>> from rca_learn import RCA
  >>> X = [[-0.05,  3.0],[0.05, -3.0],
  >>>     [0.1, -3.55],[-0.1, 3.55],
  >>>     [-0.95, -0.05],[0.95, 0.05],
  >>>     [0.4,  0.05],[-0.4, -0.05]]
  >>> chunks = [[1, 2], [3, 4], [5, 6], [7, 8]]
  >>> rca = RCA()
  >>> rca.fit(X, chunks)

  References
  ------------------
  .. [1] Aharon Bar-Hillel, Tomer Hertz, Noam Shental and Daphna Weinshall.
         `Learning Distance Functions using Equivalence Relations
         <https://www.aaai.org/Papers/ICML/2003/ICML03-005.pdf>`_. ICML 2003.

  Attributes
  ----------
  components_ : `numpy.ndarray`, shape=(n_features, n_features)
    The learned whitening transformation ``A``. It is symmetric.

  mahalanobis_matrix_ : `numpy.ndarray`, shape=(n_features, n_features)
    The learned Mahalanobis matrix ``B``, inverse of the average chunklet
    scatter matrix.

  inner_cov_ : `numpy.ndarray`, shape=(n_features, n_features)
    The inner covariance matrix of the chunklets.

  n_memberships_ : int
    Sum of the sizes of the chunklets used for fitting.
  """

  def __init__(self, index_base=1, max_condition=None, tol=None):
    self.index_base = index_base
    self.max_condition = max_condition
    self.tol = tol

  def _fit(self, X, chunks, index_base):
    B, A, inner_cov, chunks = _rca(X, chunks, index_base=index_base,
                                   max_condition=self.max_condition,
                                   tol=self.tol, estimator=self)
    self.components_ = A
    self.mahalanobis_matrix_ = B
    self.inner_cov_ = inner_cov
    self.n_memberships_ = chunks.n_memberships
    self.n_features_in_ = X.shape[1]
    return self

  def fit(self, X, chunks):
    """Learn the RCA model.

    Parameters
    ----------
    X : (n x d) data matrix
      Each row corresponds to a single instance

    chunks : `ChunkletCollection`, list of lists of ints, or (n,) array of ints
      Either a list of chunklets, each one a list of row indices (starting
      at ``index_base``), or an array of chunk labels: when
      ``chunks[i] == -1``, point i doesn't belong to any chunklet, and when
      ``chunks[i] == j``, point i belongs to chunklet j.
    """
    X = check_input(X, type_of_inputs='classic', dtype=np.float64,
                    estimator=self)
    return self._fit(X, chunks, self.index_base)


class RCA_Supervised(RCA):
  """Supervised version of Relevant Components Analysis (RCA)

  `RCA_Supervised` creates chunks of similar points by first sampling a
  class, taking `chunk_size` elements in it, and repeating the process
  `num_chunks` times.

  Parameters
  ----------
  num_chunks: int, optional (default=100)
    Number of chunks to generate.

  chunk_size: int, optional (default=2)
    Number of points per chunk.

  max_condition : float or None, optional (default=None)
    Largest accepted condition number of the average chunklet scatter
    matrix. If None, 1 / eps of the data type is used.

  tol : float or None, optional (default=None)
    Positivity tolerance on the eigenvalues of the inner covariance matrix.
    If None, a tolerance relative to the largest eigenvalue is used.

  random_state : int or numpy.RandomState or None, optional (default=None)
    A pseudo random number generator object or a seed for it if int.
    It is used to randomly sample chunklets from labels.

  Examples
  --------
  >>> from rca_learn import RCA_Supervised
  >>> from sklearn.datasets import load_iris
  >>> iris_data = load_iris()
  >>> X = iris_data['data']
  >>> Y = iris_data['target']
  >>> rca = RCA_Supervised(num_chunks=30, chunk_size=2)
  >>> rca.fit(X, Y)

  Attributes
  ----------
  components_ : `numpy.ndarray`, shape=(n_features, n_features)
    The learned whitening transformation ``A``.
  """

  def __init__(self, num_chunks=100, chunk_size=2, max_condition=None,
               tol=None, random_state=None):
    """Initialize the supervised version of `RCA`."""
    self.num_chunks = num_chunks
    self.chunk_size = chunk_size
    self.max_condition = max_condition
    self.tol = tol
    self.random_state = random_state

  def fit(self, X, y):
    """Create chunklets from labels and learn the RCA model.

    Parameters
    ----------
    X : (n x d) data matrix
      each row corresponds to a single instance

    y : (n) data labels, negative for unknown labels
    """
    X = check_input(X, type_of_inputs='classic', dtype=np.float64,
                    ensure_min_samples=2, estimator=self)
    y = np.ravel(y)
    check_consistent_length(X, y)
    chunks = Constraints(y).chunks(num_chunks=self.num_chunks,
                                   chunk_size=self.chunk_size,
                                   random_state=self.random_state)

    if self.num_chunks * (self.chunk_size - 1) < X.shape[1]:
      warnings.warn('Due to the parameters of RCA_Supervised, '
                    'the inner covariance matrix is not invertible, '
                    'so the model cannot be fitted. '
                    'Increase the number or size of the chunks to correct '
                    'this problem.'
                    )

    return self._fit(X, chunks, chunks.index_base)
