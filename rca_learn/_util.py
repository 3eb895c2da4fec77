import numpy as np
from sklearn.utils import check_array
from .exceptions import InvalidInputError, NonPositiveDefiniteError


def check_input(input_data, type_of_inputs='classic', tuple_size=None,
                dtype='numeric', copy=False, ensure_min_samples=1,
                ensure_min_features=1, estimator=None):
  """Checks that the input format is valid, and converts it if specified
  (this is the equivalent of scikit-learn's `check_array`, extended to
  arrays of tuples of points).

  Parameters
  ----------
  input_data : array-like
    The input data array to check.

  type_of_inputs : `str` {'classic', 'tuples'}
    The type of inputs to check. If 'classic', the input should be
    a 2D array-like of points. If 'tuples', the input should be a 3D
    array-like of tuples of points.

  tuple_size : int
    The number of elements in a tuple (e.g. 2 for pairs).

  dtype : string, type, list of types or None (default='numeric')
    Data type of result. If None, the dtype of the input is preserved.
    If 'numeric', dtype is preserved unless array.dtype is object.

  copy : boolean (default=False)
    Whether a forced copy will be triggered.

  ensure_min_samples : int (default=1)
    Make sure that the input has a minimum number of samples in its first
    axis.

  ensure_min_features : int (default=1)
    Make sure that the input has some minimum number of features. The
    default value of 1 rejects empty datasets.

  estimator : str or estimator instance (default=`None`)
    If passed, include the name of the estimator in error messages.

  Returns
  -------
  X : `numpy.ndarray`
    The checked input data array.

  Raises
  ------
  InvalidInputError
    If the array has the wrong number of dimensions, too few samples or
    features, or non finite values.
  """
  context = make_context(estimator)

  if type_of_inputs == 'classic':
    expected_ndim = 2
  elif type_of_inputs == 'tuples':
    expected_ndim = 3
  else:
    raise ValueError("Unknown value {} for type_of_inputs. Valid values are "
                     "'classic' or 'tuples'.".format(type_of_inputs))

  try:
    input_data = check_array(input_data, allow_nd=True, ensure_2d=False,
                             dtype=dtype, copy=copy,
                             ensure_min_samples=ensure_min_samples,
                             ensure_min_features=0, estimator=estimator)
  except ValueError as e:
    raise InvalidInputError(str(e)) from e

  if input_data.ndim != expected_ndim:
    make_error_input(expected_ndim, input_data, context)

  # check_array does not count features on 3D inputs, so we do it for both
  n_features = input_data.shape[-1]
  if n_features < ensure_min_features:
    raise InvalidInputError("Found array with {} feature(s) (shape={}) while"
                            " a minimum of {} is required{}."
                            .format(n_features, input_data.shape,
                                    ensure_min_features, context))
  if type_of_inputs == 'tuples':
    check_tuple_size(input_data, tuple_size, context)
  return input_data


def make_error_input(expected_ndim, input_data, context):
  expected_input = {2: '2D array of formed points',
                    3: '3D array of formed tuples'}[expected_ndim]
  err_msg = ('{expected_input} expected{context}. Found {found_size}D array '
             'instead:\ninput={input_data}. Reshape your data.\n')
  raise InvalidInputError(err_msg.format(expected_input=expected_input,
                                         context=context,
                                         found_size=input_data.ndim,
                                         input_data=input_data))


def make_context(estimator):
  """Helper function to create a string with the estimator name.
  Taken from check_array function in scikit-learn.
  Will return the following for instance:
  RCA: ' by RCA'
  'RCA': ' by RCA'
  None: ''
  """
  estimator_name = make_name(estimator)
  context = (' by ' + estimator_name) if estimator_name is not None else ''
  return context


def make_name(estimator):
  """Helper function that returns the name of estimator or the given string
  if a string is given
  """
  if estimator is not None:
    if isinstance(estimator, str):
      estimator_name = estimator
    else:
      estimator_name = estimator.__class__.__name__
  else:
    estimator_name = None
  return estimator_name


def check_tuple_size(tuples, tuple_size, context):
  """Helper function to check that the number of points in each tuple is
  equal to tuple_size (e.g. 2 for pairs), and raise a `ValueError` otherwise"""
  if tuple_size is not None and tuples.shape[1] != tuple_size:
    msg_t = (("Tuples of {} element(s) expected{}. Got tuples of {} "
             "element(s) instead (shape={}):\ninput={}.\n")
             .format(tuple_size, context, tuples.shape[1], tuples.shape,
                     tuples))
    raise InvalidInputError(msg_t)


def _check_pd_from_eigen(w, tol=None):
  """Checks that all the eigenvalues given are strictly positive, up to a
  tolerance level, with a default value of the tolerance depending on the
  eigenvalues.

  Parameters
  ----------
  w : array-like, shape=(n_eigenvalues,)
    Eigenvalues of a symmetric matrix.

  tol : positive `float`, optional
    Eigenvalues below tol are considered non positive. If tol is None, and
    eps is the epsilon value for datatype of w, then tol is set to
    abs(w).max() * len(w) * eps.

  Returns
  -------
  tol : float
    The tolerance that was applied.

  Raises
  ------
  NonPositiveDefiniteError
    If some eigenvalue is not larger than the tolerance.

  See Also
  --------
  np.linalg.matrix_rank for more details on the choice of tolerance (the same
    strategy is applied here)
  """
  w = np.asarray(w)
  if tol is None:
    tol = np.abs(w).max() * len(w) * np.finfo(w.dtype).eps
  if tol < 0:
    raise ValueError("tol should be positive.")
  if not np.all(w > tol):
    raise NonPositiveDefiniteError(w.min(), tol)
  return tol


def _symmetrize(M):
  return (M + M.T) / 2.


def validate_vector(u, dtype=None):
  # replica of scipy.spatial.distance._validate_vector, for making scipy
  # compatible functions on vectors (such as distances computations)
  u = np.asarray(u, dtype=dtype, order='c').squeeze()
  # Ensure values such as u=1 and u=[1] still return 1-D arrays.
  u = np.atleast_1d(u)
  if u.ndim > 1:
    raise ValueError("Input vector should be 1-D.")
  return u
