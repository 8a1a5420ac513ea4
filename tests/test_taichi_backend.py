import importlib.util
from unittest import TestCase, skipUnless

import numpy as np

from rdengine import kinetics
from rdengine.grid import GridStore
from rdengine.kinetics import Model
from rdengine.params import Parameters
from rdengine.stepper import NumpyStepper

HAS_TAICHI = importlib.util.find_spec("taichi") is not None


@skipUnless(HAS_TAICHI, "taichi not installed")
class TestTaichiStepper(TestCase):

    @classmethod
    def setUpClass(cls):
        import taichi as ti
        from rdengine import taichi_backend
        taichi_backend.init(ti.cpu)
        cls.stepper = taichi_backend.TaichiStepper()

    def _compare(self, model, steps=16, n=32):
        pattern = np.random.default_rng(2).random((2, n, n))
        ref, gpu = GridStore(n), GridStore(n)
        ref.seed(pattern)
        gpu.seed(pattern)
        params = Parameters.for_model(model)
        reaction = kinetics.reaction_for(model)
        NumpyStepper().advance(ref, params, reaction, steps)
        self.assertEqual(self.stepper.advance(gpu, params, reaction, steps), steps)
        np.testing.assert_allclose(gpu.current(), ref.current(), atol=1e-4)

    def test_matches_numpy_for_every_model(self):
        for model in Model:
            self._compare(model)

    def test_odd_step_count_and_resize(self):
        self._compare(Model.GRAY_SCOTT, steps=3, n=20)
        self._compare(Model.GRAY_SCOTT, steps=5, n=24)

    def test_engine_backend(self):
        from rdengine import Engine
        engine = Engine(resolution=16, rng_seed=0, backend="taichi")
        self.assertEqual(engine.stepper.name, "taichi")
        self.assertEqual(engine.tick(16), 8)
