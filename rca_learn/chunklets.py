"""
Value types describing chunklets, i.e. groups of points that are known to
share the same (unknown) label.
"""
import numpy as np

from .exceptions import InvalidInputError, IndexOutOfRangeError

__all__ = ['Chunklet', 'ChunkletCollection', 'check_chunklets']


def _as_index_array(indices):
  """Converts a sequence of row indices to a read-only 1D int array"""
  try:
    arr = np.asarray(indices)
  except ValueError as e:
    raise InvalidInputError("Chunklet indices could not be converted to an "
                            "array: {}".format(e)) from e
  if arr.ndim != 1:
    raise InvalidInputError("A chunklet should be a 1D sequence of row "
                            "indices, got an array of shape {}."
                            .format(arr.shape))
  if arr.size == 0:
    raise InvalidInputError("A chunklet should contain at least one index.")
  if arr.dtype.kind == 'f':
    # integral floats are accepted, e.g. indices coming from a float array
    if not (np.all(np.isfinite(arr)) and np.all(np.mod(arr, 1) == 0)):
      raise InvalidInputError("Chunklet indices should be integers, got {}."
                              .format(arr))
  elif arr.dtype.kind not in 'iu':
    raise InvalidInputError("Chunklet indices should be integers, got dtype "
                            "{}.".format(arr.dtype))
  arr = arr.astype(np.intp)
  arr.flags.writeable = False
  return arr


class Chunklet(object):
  """An ordered group of row indices believed to share a label.

  Parameters
  ----------
  indices : array-like of ints, shape=(size,)
    Row indices of the members of the chunklet, in the index base of the
    collection the chunklet belongs to. The order is kept.

  Attributes
  ----------
  indices : `numpy.ndarray` of ints, shape=(size,)
    Read-only array of the row indices.
  """

  def __init__(self, indices):
    if isinstance(indices, Chunklet):
      indices = indices.indices
    self.indices = _as_index_array(indices)

  def __len__(self):
    return self.indices.shape[0]

  def __iter__(self):
    return iter(self.indices.tolist())

  def __eq__(self, other):
    if not isinstance(other, Chunklet):
      return NotImplemented
    return np.array_equal(self.indices, other.indices)

  def __hash__(self):
    return hash(tuple(self.indices.tolist()))

  def __repr__(self):
    return 'Chunklet({})'.format(self.indices.tolist())


class ChunkletCollection(object):
  """Ordered, non-empty collection of chunklets.

  Chunklets may overlap and do not need to cover every point: a point that
  appears in several chunklets is counted once per chunklet in
  ``n_memberships``.

  Parameters
  ----------
  chunklets : sequence of `Chunklet` or of array-like of ints
    The chunklets, in order.

  index_base : {0, 1}, optional (default=1)
    Index of the first row of the data. With ``index_base=1`` the valid
    indices of a data matrix with ``n`` rows are ``1, ..., n``.

  Attributes
  ----------
  chunklets : tuple of `Chunklet`
    The validated chunklets.

  n_memberships : int
    Total number of (index, chunklet) memberships, i.e. the sum of the
    chunklet sizes.

  Examples
  --------
  >>> from rca_learn.chunklets import ChunkletCollection
  >>> chunks = ChunkletCollection([[1, 2], [3, 4, 5]])
  >>> chunks.n_memberships
  5
  >>> chunks.positions()
  [array([0, 1]), array([2, 3, 4])]
  """

  def __init__(self, chunklets, index_base=1):
    if index_base not in (0, 1):
      raise ValueError("index_base should be 0 or 1, got {}."
                       .format(index_base))
    if (isinstance(chunklets, (Chunklet, str, bytes)) or
            not hasattr(chunklets, '__iter__')):
      raise InvalidInputError("Chunklets should be given as a sequence of "
                              "sequences of row indices.")
    chunklets = tuple(Chunklet(c) for c in chunklets)
    if len(chunklets) == 0:
      raise InvalidInputError("At least one chunklet is required.")
    self.chunklets = chunklets
    self.index_base = index_base
    self.n_memberships = int(sum(len(c) for c in chunklets))
    for i, c in enumerate(chunklets):
      low = c.indices.min()
      if low < index_base:
        raise IndexOutOfRangeError(i, int(low), index_base, 'n')

  @classmethod
  def from_labels(cls, chunk_labels, index_base=1):
    """Builds a collection from an array of chunk labels.

    Parameters
    ----------
    chunk_labels : array-like of ints, shape=(n_samples,)
      When ``chunk_labels[i] == -1`` (or any negative value), point i
      doesn't belong to any chunklet. When ``chunk_labels[i] == j``, point i
      belongs to chunklet j. Chunklets are ordered by label.

    index_base : {0, 1}, optional (default=1)
      Index base of the returned collection.

    Returns
    -------
    chunks : `ChunkletCollection`
    """
    chunk_labels = np.asanyarray(chunk_labels)
    if chunk_labels.ndim != 1:
      raise InvalidInputError("Chunk labels should be a 1D array, got shape "
                              "{}.".format(chunk_labels.shape))
    if chunk_labels.size == 0:
      raise InvalidInputError("At least one chunklet is required.")
    chunk_labels = _as_index_array(chunk_labels)
    ids = np.unique(chunk_labels[chunk_labels >= 0])
    if ids.size == 0:
      raise InvalidInputError("No point is assigned to a chunklet: all "
                              "chunk labels are negative.")
    return cls([np.flatnonzero(chunk_labels == c) + index_base for c in ids],
               index_base=index_base)

  def to_labels(self, n_samples):
    """Returns the chunk label array of the collection.

    Parameters
    ----------
    n_samples : int
      Number of rows of the data matrix.

    Returns
    -------
    chunk_labels : `numpy.ndarray` of ints, shape=(n_samples,)
      Chunk label of every point, -1 for points outside of any chunklet.
    """
    if self.has_overlap():
      raise ValueError("Overlapping chunklets cannot be encoded as an array "
                       "of chunk labels.")
    labels = -np.ones(n_samples, dtype=int)
    for i, positions in enumerate(self.positions(n_samples)):
      labels[positions] = i
    return labels

  def check_bounds(self, n_samples):
    """Checks that every index references one of the ``n_samples`` rows.

    Raises
    ------
    IndexOutOfRangeError
      For the first chunklet that references a missing row.
    """
    high = n_samples - 1 + self.index_base
    for i, c in enumerate(self.chunklets):
      out = (c.indices < self.index_base) | (c.indices > high)
      if np.any(out):
        raise IndexOutOfRangeError(i, int(c.indices[out][0]),
                                   self.index_base, high)

  def positions(self, n_samples=None):
    """Returns the 0-based row positions of every chunklet.

    If ``n_samples`` is given, the indices are first checked to be in range.
    """
    if n_samples is not None:
      self.check_bounds(n_samples)
    return [c.indices - self.index_base for c in self.chunklets]

  def has_overlap(self):
    all_indices = np.concatenate([np.unique(c.indices)
                                  for c in self.chunklets])
    return np.unique(all_indices).size < all_indices.size

  @property
  def n_singletons(self):
    """Number of chunklets with a single member"""
    return sum(1 for c in self.chunklets if len(c) == 1)

  def __len__(self):
    return len(self.chunklets)

  def __iter__(self):
    return iter(self.chunklets)

  def __getitem__(self, item):
    return self.chunklets[item]

  def __repr__(self):
    return 'ChunkletCollection({}, index_base={})'.format(
        [c.indices.tolist() for c in self.chunklets], self.index_base)


def _is_label_array(chunks):
  if isinstance(chunks, np.ndarray):
    return chunks.ndim == 1 and chunks.dtype != object
  try:
    return len(chunks) > 0 and all(
        not isinstance(c, Chunklet) and np.ndim(c) == 0 for c in chunks)
  except TypeError:
    return False


def check_chunklets(chunks, n_samples, index_base=1):
  """Converts any supported chunklets format to a `ChunkletCollection`
  checked against a data matrix with ``n_samples`` rows.

  Parameters
  ----------
  chunks : `ChunkletCollection`, sequence of sequences of ints, or array-like
    of ints of shape (n_samples,)
    A collection is used as such. A sequence of sequences is read as a list
    of chunklets in index base ``index_base``. A flat sequence of length
    ``n_samples`` is read as an array of chunk labels (see
    `ChunkletCollection.from_labels`).

  n_samples : int
    Number of rows of the data matrix.

  index_base : {0, 1}, optional (default=1)
    Index base of the chunklets. A collection must have been built with
    the same index base.

  Returns
  -------
  chunks : `ChunkletCollection`

  Raises
  ------
  ValueError
    If ``index_base`` is not 0 or 1, or differs from the index base of a
    given collection.
  """
  if index_base not in (0, 1):
    raise ValueError("index_base should be 0 or 1, got {}."
                     .format(index_base))
  if isinstance(chunks, ChunkletCollection):
    if chunks.index_base != index_base:
      raise ValueError("The chunklet collection uses index_base={}, but "
                       "index_base={} was requested. Build the collection "
                       "with the same index base."
                       .format(chunks.index_base, index_base))
  else:
    if _is_label_array(chunks):
      if len(chunks) != n_samples:
        raise InvalidInputError("An array of chunk labels should have one "
                                "entry per sample: got {} labels for {} "
                                "samples.".format(len(chunks), n_samples))
      chunks = ChunkletCollection.from_labels(chunks, index_base=index_base)
    else:
      chunks = ChunkletCollection(chunks, index_base=index_base)
  chunks.check_bounds(n_samples)
  return chunks
