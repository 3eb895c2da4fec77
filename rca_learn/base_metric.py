"""
Mahalanobis estimator mixin shared by the RCA learners.
"""

import numpy as np
from sklearn.utils.validation import check_is_fitted

from ._util import check_input, validate_vector
from .exceptions import InvalidInputError


class MahalanobisMixin(object):
  r"""Estimator holding a learned Mahalanobis metric and its whitening
  transformation.

  The squared distance between two points is
  :math:`d_B(x, x')^2 = (x-x')^T B (x-x')`. Since :math:`B = A^T A`, it is
  also the squared euclidean distance between the embeddings :math:`A x`
  and :math:`A x'`.

  Estimators using the mixin set the following attributes in `fit`.

  Attributes
  ----------
  components_ : `numpy.ndarray`, shape=(n_features, n_features)
    The whitening transformation ``A``.

  mahalanobis_matrix_ : `numpy.ndarray`, shape=(n_features, n_features)
    The Mahalanobis matrix ``B``.
  """

  def _check_n_features(self, X):
    n_features = self.mahalanobis_matrix_.shape[0]
    if X.shape[-1] != n_features:
      raise InvalidInputError("X has {} features, but {} was fitted on {} "
                              "features.".format(X.shape[-1],
                                                 self.__class__.__name__,
                                                 n_features))

  def transform(self, X):
    """Embeds data points in the whitened space: ``X.dot(A.T)``.

    Parameters
    ----------
    X : array-like, shape=(n_samples, n_features)
      The data points to embed.

    Returns
    -------
    X_embedded : `numpy.ndarray`, shape=(n_samples, n_features)
    """
    check_is_fitted(self, 'components_')
    X = check_input(X, type_of_inputs='classic', estimator=self)
    self._check_n_features(X)
    return X.dot(self.components_.T)

  def pair_distance(self, pairs):
    """Returns the Mahalanobis distance within each pair of points.

    Parameters
    ----------
    pairs : array-like, shape=(n_pairs, 2, n_features)
      The pairs, each row holding two points.

    Returns
    -------
    distances : `numpy.ndarray`, shape=(n_pairs,)
    """
    check_is_fitted(self, 'mahalanobis_matrix_')
    pairs = check_input(pairs, type_of_inputs='tuples', tuple_size=2,
                        estimator=self)
    self._check_n_features(pairs)
    diffs = pairs[:, 1, :] - pairs[:, 0, :]
    sq_dists = np.einsum('ij,jk,ik->i', diffs, self.mahalanobis_matrix_,
                         diffs)
    # B is positive definite, negative values are rounding errors
    return np.sqrt(np.maximum(sq_dists, 0.))

  def get_metric(self):
    """Returns a function computing the learned distance between two 1D
    arrays.

    The function keeps its own copy of ``B``: refitting the estimator does
    not change it. It can be given as `metric` to scikit-learn estimators.

    Examples
    --------
    >>> from rca_learn import RCA_Supervised
    >>> from sklearn.datasets import load_iris
    >>> from sklearn.neighbors import KNeighborsClassifier
    >>> X, y = load_iris(return_X_y=True)
    >>> rca = RCA_Supervised(num_chunks=30, random_state=0).fit(X, y)
    >>> knn = KNeighborsClassifier(metric=rca.get_metric()).fit(X, y)
    """
    check_is_fitted(self, 'mahalanobis_matrix_')
    B = self.mahalanobis_matrix_.copy()

    def metric_fun(u, v, squared=False):
      diff = validate_vector(u) - validate_vector(v)
      dist = max(diff.dot(B).dot(diff), 0.)
      return dist if squared else np.sqrt(dist)

    return metric_fun

  def get_mahalanobis_matrix(self):
    """Returns a copy of the learned Mahalanobis matrix ``B``."""
    check_is_fitted(self, 'mahalanobis_matrix_')
    return self.mahalanobis_matrix_.copy()
