from .chunklets import Chunklet, ChunkletCollection
from .constraints import Constraints
from .rca import RCA, RCA_Supervised, RCAResult, rca

from ._version import __version__

__all__ = ['Chunklet', 'ChunkletCollection', 'Constraints', 'RCA',
           'RCA_Supervised', 'RCAResult', 'rca', '__version__']
