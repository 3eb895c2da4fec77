import numpy as np
from sklearn.datasets import load_iris

import rca_learn

CLASSES = {
    'RCA_Supervised_pairs': rca_learn.RCA_Supervised(num_chunks=30,
                                                     chunk_size=2),
    'RCA_Supervised_large_chunks': rca_learn.RCA_Supervised(num_chunks=10,
                                                            chunk_size=5),
}


class IrisDataset(object):
  params = [sorted(CLASSES)]
  param_names = ['alg']

  def setup(self, alg):
    iris_data = load_iris()
    self.iris_points = iris_data['data']
    self.iris_labels = iris_data['target']

  def time_fit(self, alg):
    np.random.seed(5555)
    CLASSES[alg].fit(self.iris_points, self.iris_labels)
