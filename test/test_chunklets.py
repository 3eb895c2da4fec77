import pytest
import numpy as np
from numpy.testing import assert_array_equal

from rca_learn.chunklets import Chunklet, ChunkletCollection, check_chunklets
from rca_learn.exceptions import InvalidInputError, IndexOutOfRangeError


class TestChunklet(object):

  def test_keeps_order(self):
    c = Chunklet([3, 1, 2])
    assert list(c) == [3, 1, 2]
    assert len(c) == 3

  def test_read_only(self):
    c = Chunklet(np.array([1, 2]))
    with pytest.raises(ValueError):
      c.indices[0] = 5

  def test_does_not_share_memory_with_input(self):
    indices = np.array([1, 2, 3])
    c = Chunklet(indices)
    indices[0] = 10
    assert list(c) == [1, 2, 3]

  def test_integral_floats_accepted(self):
    assert list(Chunklet([1., 2.])) == [1, 2]

  @pytest.mark.parametrize('indices', [[], [1.5, 2], [[1, 2]], 3, ['a', 'b'],
                                       [True, False], [1., np.nan]])
  def test_invalid_indices(self, indices):
    with pytest.raises(InvalidInputError):
      Chunklet(indices)

  def test_equality(self):
    assert Chunklet([1, 2]) == Chunklet(np.array([1, 2]))
    assert Chunklet([1, 2]) != Chunklet([2, 1])
    assert hash(Chunklet([1, 2])) == hash(Chunklet([1, 2]))
    assert repr(Chunklet([1, 2])) == 'Chunklet([1, 2])'


class TestChunkletCollection(object):

  def test_memberships(self):
    chunks = ChunkletCollection([[1, 2], [3, 4, 5], [5, 6]])
    assert len(chunks) == 3
    # a point in two chunklets is counted twice
    assert chunks.n_memberships == 7
    assert chunks[1] == Chunklet([3, 4, 5])
    assert [len(c) for c in chunks] == [2, 3, 2]

  def test_positions(self):
    chunks = ChunkletCollection([[1, 2], [4, 3]])
    positions = chunks.positions()
    assert_array_equal(positions[0], [0, 1])
    assert_array_equal(positions[1], [3, 2])
    positions = ChunkletCollection([[0, 1]], index_base=0).positions()
    assert_array_equal(positions[0], [0, 1])

  def test_check_bounds(self):
    chunks = ChunkletCollection([[1, 2], [3, 4]])
    chunks.check_bounds(4)
    with pytest.raises(IndexOutOfRangeError) as e:
      chunks.check_bounds(3)
    assert e.value.chunk_idx == 1
    assert e.value.index == 4
    with pytest.raises(IndexOutOfRangeError):
      chunks.positions(3)

  def test_lower_bound_checked_at_construction(self):
    with pytest.raises(IndexOutOfRangeError) as e:
      ChunkletCollection([[1, 2], [0, 3]])
    assert e.value.chunk_idx == 1
    assert e.value.index == 0
    ChunkletCollection([[1, 2], [0, 3]], index_base=0)

  @pytest.mark.parametrize('chunklets', [[], Chunklet([1, 2]), 'abc', 5,
                                         [1, 2]])
  def test_invalid_collection(self, chunklets):
    with pytest.raises(InvalidInputError):
      ChunkletCollection(chunklets)

  def test_invalid_index_base(self):
    with pytest.raises(ValueError):
      ChunkletCollection([[1, 2]], index_base=2)

  def test_accepts_chunklets(self):
    chunks = ChunkletCollection([Chunklet([1, 2]), [3, 4]])
    assert chunks[0] == Chunklet([1, 2])

  def test_overlap_and_singletons(self):
    chunks = ChunkletCollection([[1, 2], [3], [4]])
    assert not chunks.has_overlap()
    assert chunks.n_singletons == 2
    chunks = ChunkletCollection([[1, 2], [2, 3]])
    assert chunks.has_overlap()
    assert chunks.n_singletons == 0

  def test_from_labels(self):
    labels = [2, 0, -1, 0, 2, -1, 5]
    chunks = ChunkletCollection.from_labels(labels)
    assert [list(c) for c in chunks] == [[2, 4], [1, 5], [7]]
    chunks = ChunkletCollection.from_labels(labels, index_base=0)
    assert [list(c) for c in chunks] == [[1, 3], [0, 4], [6]]

  @pytest.mark.parametrize('labels', [[-1, -1], [], [[0, 1]]])
  def test_from_labels_invalid(self, labels):
    with pytest.raises(InvalidInputError):
      ChunkletCollection.from_labels(labels)

  def test_to_labels(self):
    labels = np.array([1, 0, -1, 0, 1, -1])
    chunks = ChunkletCollection.from_labels(labels)
    assert_array_equal(chunks.to_labels(6), [1, 0, -1, 0, 1, -1])
    with pytest.raises(ValueError):
      ChunkletCollection([[1, 2], [2, 3]]).to_labels(3)

  def test_repr(self):
    chunks = ChunkletCollection([[1, 2], [3]])
    assert repr(chunks) == 'ChunkletCollection([[1, 2], [3]], index_base=1)'


class TestCheckChunklets(object):

  def test_groups(self):
    chunks = check_chunklets([[1, 2], [3, 4]], 4)
    assert isinstance(chunks, ChunkletCollection)
    assert chunks.n_memberships == 4

  def test_collection_used_as_is(self):
    chunks = ChunkletCollection([[0, 1]], index_base=0)
    assert check_chunklets(chunks, 2, index_base=0) is chunks

  def test_collection_with_other_index_base(self):
    chunks = ChunkletCollection([[0, 1]], index_base=0)
    with pytest.raises(ValueError, match='index_base=0'):
      check_chunklets(chunks, 2, index_base=1)
    chunks = ChunkletCollection([[1, 2]])
    with pytest.raises(ValueError):
      check_chunklets(chunks, 2, index_base=0)

  @pytest.mark.parametrize('index_base', [5, -1, 2])
  def test_invalid_index_base(self, index_base):
    with pytest.raises(ValueError):
      check_chunklets(ChunkletCollection([[1, 2], [3, 4]]), 4,
                      index_base=index_base)
    with pytest.raises(ValueError):
      check_chunklets([[1, 2], [3, 4]], 4, index_base=index_base)

  def test_label_array(self):
    chunks = check_chunklets(np.array([0, 0, -1, 1, 1]), 5)
    assert [list(c) for c in chunks] == [[1, 2], [4, 5]]
    chunks = check_chunklets([0, 0, -1, 1, 1], 5, index_base=0)
    assert [list(c) for c in chunks] == [[0, 1], [3, 4]]

  def test_list_of_chunklets(self):
    chunks = check_chunklets([Chunklet([1, 2]), Chunklet([3, 4])], 4)
    assert [list(c) for c in chunks] == [[1, 2], [3, 4]]

  def test_label_array_wrong_length(self):
    with pytest.raises(InvalidInputError):
      check_chunklets([0, 0, 1], 5)

  def test_out_of_range(self):
    with pytest.raises(IndexOutOfRangeError):
      check_chunklets([[1, 2], [3, 6]], 5)
