"""
Tests general things from the API: String parsing, methods like get_metric,
and not fitted errors.
"""
import pytest
import re
import unittest
import numpy as np
from numpy.testing import assert_allclose, assert_array_equal
from itertools import product
from scipy.spatial.distance import mahalanobis
from sklearn import clone
from sklearn.datasets import load_iris
from sklearn.exceptions import NotFittedError
from sklearn.neighbors import KNeighborsClassifier

import rca_learn
from rca_learn import RCA, RCA_Supervised
from rca_learn.exceptions import InvalidInputError


def remove_spaces(s):
  return re.sub(r'\s+', '', s)


def fitted_rca():
  X, y = load_iris(return_X_y=True)
  return RCA_Supervised(num_chunks=30, random_state=42).fit(X, y), X, y


class TestStringRepr(unittest.TestCase):

  def test_rca(self):
    self.assertEqual(remove_spaces(str(rca_learn.RCA(index_base=0))),
                     remove_spaces("RCA(index_base=0)"))
    self.assertEqual(remove_spaces(str(rca_learn.RCA())), "RCA()")
    self.assertEqual(
        remove_spaces(str(rca_learn.RCA_Supervised(num_chunks=5))),
        remove_spaces("RCA_Supervised(num_chunks=5)"))

  def test_params(self):
    self.assertEqual(RCA().get_params(),
                     {'index_base': 1, 'max_condition': None, 'tol': None})
    self.assertEqual(
        sorted(RCA_Supervised().get_params()),
        ['chunk_size', 'max_condition', 'num_chunks', 'random_state', 'tol'])


@pytest.mark.parametrize('method, args', [('transform', (np.ones((2, 4)),)),
                                          ('get_metric', ()),
                                          ('get_mahalanobis_matrix', ()),
                                          ('pair_distance',
                                           (np.ones((2, 2, 4)),))])
def test_not_fitted(method, args):
  with pytest.raises(NotFittedError):
    getattr(RCA(), method)(*args)


def test_get_metric_is_mahalanobis():
  model, X, _ = fitted_rca()
  metric = model.get_metric()
  M = model.get_mahalanobis_matrix()
  for u, v in product(X[:5], X[5:10]):
    assert_allclose(metric(u, v), mahalanobis(u, v, M), rtol=1e-7)
    assert_allclose(metric(u, v, squared=True), mahalanobis(u, v, M)**2,
                    rtol=1e-7)


def test_get_metric_independent_of_learner():
  model, X, y = fitted_rca()
  metric = model.get_metric()
  before = metric(X[0], X[1])
  model.set_params(num_chunks=40, random_state=0).fit(X, y)
  assert metric(X[0], X[1]) == before


def test_get_metric_in_sklearn_estimator():
  model, X, y = fitted_rca()
  knn = KNeighborsClassifier(metric=model.get_metric())
  knn.fit(X, y)
  assert knn.score(X, y) > 0.9


def test_pair_distance():
  model, X, _ = fitted_rca()
  pairs = np.stack([X[:10], X[10:20]], axis=1)
  distances = model.pair_distance(pairs)
  embedded = model.transform(X)
  expected = np.linalg.norm(embedded[10:20] - embedded[:10], axis=1)
  assert_allclose(distances, expected)
  with pytest.raises(InvalidInputError):
    model.pair_distance(X[:10])


def test_transform_wrong_n_features():
  model, X, _ = fitted_rca()
  with pytest.raises(InvalidInputError):
    model.transform(X[:, :2])


def test_fit_transform():
  X, y = load_iris(return_X_y=True)
  res_1 = RCA_Supervised(num_chunks=30, random_state=1234).fit(X, y)\
      .transform(X)
  res_2 = RCA_Supervised(num_chunks=30, random_state=1234).fit_transform(X, y)
  assert_allclose(res_1, res_2)

  chunks = [[1, 2, 3], [51, 52, 53], [101, 102, 103], [4, 5, 6]]
  res_1 = RCA().fit(X, chunks).transform(X)
  res_2 = RCA().fit_transform(X, chunks)
  assert_allclose(res_1, res_2)


def test_clone():
  model, X, y = fitted_rca()
  cloned = clone(model)
  assert cloned.get_params() == model.get_params()
  assert not hasattr(cloned, 'components_')
  assert_allclose(cloned.fit(X, y).components_, model.components_)


def test_mahalanobis_matrix_is_a_copy():
  model, X, _ = fitted_rca()
  M = model.get_mahalanobis_matrix()
  assert_array_equal(M, model.mahalanobis_matrix_)
  M[0, 0] += 1.
  assert model.get_mahalanobis_matrix()[0, 0] == \
      model.mahalanobis_matrix_[0, 0]


def test_pair_distance_uses_mahalanobis_matrix():
  model, X, _ = fitted_rca()
  pairs = np.stack([X[:10], X[20:30]], axis=1)
  B = model.mahalanobis_matrix_
  expected = [np.sqrt((v - u).dot(B).dot(v - u)) for u, v in pairs]
  assert_allclose(model.pair_distance(pairs), expected, rtol=1e-10)
  # identical points are at distance zero
  assert_array_equal(model.pair_distance(np.stack([X[:5], X[:5]], axis=1)),
                     0.)
  with pytest.raises(InvalidInputError):
    model.pair_distance(np.stack([X[:5, :2], X[:5, :2]], axis=1))
