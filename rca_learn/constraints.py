"""
Sampling of chunklets from partially labeled data.
"""
import numpy as np
from sklearn.utils import check_random_state

from .chunklets import ChunkletCollection

__all__ = ['Constraints']


class Constraints(object):
  """
  Samples chunklets of points sharing a known label.

  Parameters
  ----------
  partial_labels : array-like of ints, shape=(n_samples,)
    Class of every point. Negative values mark points with an unknown
    class, which are never put in a chunklet.

  Attributes
  ----------
  partial_labels : `numpy.ndarray` of ints, shape=(n_samples,)
  """

  def __init__(self, partial_labels):
    self.partial_labels = np.asanyarray(partial_labels, dtype=int).ravel()

  def _class_pools(self, random_state):
    classes = np.unique(self.partial_labels[self.partial_labels >= 0])
    return [random_state.permutation(np.flatnonzero(self.partial_labels == c))
            for c in classes]

  def chunks(self, num_chunks=100, chunk_size=2, random_state=None):
    """
    Draws ``num_chunks`` disjoint chunklets of ``chunk_size`` points each.

    The points of every known class are shuffled once. Each chunklet then
    picks, uniformly at random, a class with at least ``chunk_size`` unused
    points, and takes the next ``chunk_size`` of them.

    Parameters
    ----------
    num_chunks : int, optional (default=100)
      Number of chunklets to draw.

    chunk_size : int, optional (default=2)
      Number of points in each chunklet.

    random_state : int or numpy.RandomState or None, optional (default=None)
      A pseudo random number generator object or a seed for it if int.

    Returns
    -------
    chunks : `ChunkletCollection`
      The chunklets, as 0-based row positions (``index_base=0``).

    Raises
    ------
    ValueError
      If the classes cannot hold ``num_chunks`` chunklets of ``chunk_size``
      points.
    """
    if num_chunks < 1 or chunk_size < 1:
      raise ValueError("num_chunks and chunk_size should be positive, got "
                       "num_chunks={} and chunk_size={}."
                       .format(num_chunks, chunk_size))
    random_state = check_random_state(random_state)
    pools = self._class_pools(random_state)
    capacity = np.array([len(pool) // chunk_size for pool in pools], dtype=int)
    max_chunks = int(capacity.sum())
    if max_chunks < num_chunks:
      raise ValueError(('Not enough possible chunks of %d elements in each'
                        ' class to form expected %d chunks - maximum number'
                        ' of chunks is %d'
                        ) % (chunk_size, num_chunks, max_chunks))
    taken = np.zeros_like(capacity)
    chunklets = []
    for _ in range(num_chunks):
      c = random_state.choice(np.flatnonzero(taken < capacity))
      start = taken[c] * chunk_size
      chunklets.append(pools[c][start:start + chunk_size])
      taken[c] += 1
    return ChunkletCollection(chunklets, index_base=0)
