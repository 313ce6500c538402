import numpy as np


class Material:

    def __init__(self, k_a, k_d, k_s=0., p=0.):
        """
        Create a new material with the given parameters.

        Parameters:
          k_a : (3,) -- Ambient coefficient (color returned in shadow)
          k_d : (3,) -- Diffuse coefficient (color)
          k_s : (3,) or float -- Specular coefficient
          p : float -- Specular exponent (shininess), >= 0
        """
        self.k_a = np.array(k_a, dtype=np.float32)
        self.k_d = np.array(k_d, dtype=np.float32)
        self.k_s = np.broadcast_to(np.array(k_s, dtype=np.float32), (3,))
        self.p = float(p)
        for coeff in (self.k_a, self.k_d, self.k_s):
            coeff.setflags(write=False)

    def __repr__(self):
        return "Material(k_a={}, k_d={}, k_s={}, p={})".format(
            self.k_a.tolist(), self.k_d.tolist(), self.k_s.tolist(), self.p)
