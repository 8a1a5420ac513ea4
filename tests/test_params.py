import math
from unittest import TestCase

import numpy as np

from rdengine.kinetics import Model
from rdengine.params import (Parameters, ParameterController, ControllerState, JourneyType,
                             RANDOM_F, RANDOM_K, ease_out_cubic)


class TestParameters(TestCase):

    def test_clamped_to_domain(self):
        p = Parameters(-1, 10, 5.0, -2.0).clamped()
        self.assertEqual((p.feed, p.kill), (0.0, 0.08))
        self.assertEqual((p.diffusion_a, p.diffusion_b), (1.25, 0.0))

    def test_model_defaults(self):
        p = Parameters.for_model("schnakenberg")
        self.assertIs(p.model, Model.SCHNAKENBERG)
        self.assertEqual((p.diffusion_a, p.diffusion_b), (1.0, 0.05))

    def test_dict_snapshot(self):
        p = Parameters(0.03, 0.06, 0.4, 0.05, Model.BRUSSELATOR)
        d = p.as_dict()
        self.assertEqual(d["model"], "brusselator")
        self.assertEqual(Parameters.from_dict(d), p)
        partial = Parameters.from_dict({"model": "brusselator", "feed": 0.5})
        self.assertEqual(partial.feed, 0.1)
        self.assertEqual(partial.diffusion_a, 0.4)


class TestController(TestCase):

    def test_set_immediate_clamps(self):
        c = ParameterController()
        c.set_immediate(-1, 10)
        self.assertEqual(c.params.feed, 0.0)
        self.assertEqual(c.params.kill, 0.08)

    def test_set_immediate_keeps_diffusion_unless_given(self):
        c = ParameterController(Parameters(diffusion_a=0.3, diffusion_b=0.1))
        c.set_immediate(0.04, 0.06)
        self.assertEqual((c.params.diffusion_a, c.params.diffusion_b), (0.3, 0.1))
        c.set_immediate(0.04, 0.06, 0.5, 0.2)
        self.assertEqual((c.params.diffusion_a, c.params.diffusion_b), (0.5, 0.2))

    def test_ease_completes_monotonically(self):
        c = ParameterController(Parameters(feed=0.02, kill=0.03))
        c.ease_to(0.06, 0.07, 1000)
        self.assertIs(c.state, ControllerState.EASING)
        fs, ks = [c.params.feed], [c.params.kill]
        for _ in range(70):
            c.tick(16)
            fs.append(c.params.feed)
            ks.append(c.params.kill)
        self.assertTrue(all(b >= a for a, b in zip(fs, fs[1:])))
        self.assertTrue(all(b >= a for a, b in zip(ks, ks[1:])))
        self.assertAlmostEqual(c.params.feed, 0.06)
        self.assertAlmostEqual(c.params.kill, 0.07)
        self.assertIs(c.state, ControllerState.IDLE)

    def test_ease_curve_is_cubic_out(self):
        c = ParameterController(Parameters(feed=0.02, kill=0.03))
        c.ease_to(0.06, 0.07, 1000)
        c.tick(500)
        self.assertAlmostEqual(c.params.feed, 0.02 + 0.04 * ease_out_cubic(0.5))
        self.assertAlmostEqual(ease_out_cubic(0.5), 0.875)

    def test_zero_duration_ease_is_immediate(self):
        c = ParameterController()
        c.ease_to(0.03, 0.05, 0)
        self.assertEqual((c.params.feed, c.params.kill), (0.03, 0.05))
        self.assertIs(c.state, ControllerState.IDLE)

    def test_set_immediate_cancels_ease(self):
        c = ParameterController(Parameters(feed=0.02, kill=0.03))
        c.ease_to(0.06, 0.07, 1000)
        c.tick(100)
        c.set_immediate(0.01, 0.02)
        c.tick(2000)
        self.assertEqual((c.params.feed, c.params.kill), (0.01, 0.02))

    def test_ease_and_journey_cancel_each_other(self):
        c = ParameterController()
        c.set_journey(JourneyType.CIRCULAR)
        c.ease_to(0.03, 0.05)
        self.assertIs(c.journey.type, JourneyType.NONE)
        self.assertIs(c.state, ControllerState.EASING)
        c.set_journey("linear")
        self.assertIsNone(c.easing)
        self.assertIs(c.state, ControllerState.JOURNEYING)


class TestJourneys(TestCase):

    def test_circular_starts_on_circle(self):
        c = ParameterController()
        c.set_journey(JourneyType.CIRCULAR)
        c.tick(0)
        self.assertAlmostEqual(c.params.feed, 0.055)
        self.assertAlmostEqual(c.params.kill, 0.058)

    def test_linear_midpoint(self):
        c = ParameterController()
        c.set_journey(JourneyType.LINEAR)
        c.tick(0)
        self.assertAlmostEqual(c.params.feed, 0.04)
        self.assertAlmostEqual(c.params.kill, 0.0575)

    def test_figure8_phase(self):
        c = ParameterController()
        c.set_journey(JourneyType.FIGURE8, speed=1.0)
        c.tick(1000 * math.pi / 2)
        self.assertAlmostEqual(c.journey.phase, math.pi / 2)
        self.assertAlmostEqual(c.params.feed, 0.06)
        self.assertAlmostEqual(c.params.kill, 0.058)

    def test_set_journey_resets_phase(self):
        c = ParameterController()
        c.set_journey(JourneyType.CIRCULAR, speed=2.0)
        c.tick(500)
        self.assertAlmostEqual(c.journey.phase, 1.0)
        c.set_journey(JourneyType.FIGURE8)
        self.assertEqual(c.journey.phase, 0.0)
        self.assertEqual(c.journey.speed, 2.0)

    def test_random_walk_approaches_target(self):
        c = ParameterController(rng=np.random.default_rng(1))
        c.set_journey(JourneyType.RANDOM_WALK)
        f0, k0 = c.params.feed, c.params.kill
        c.tick(16)
        tf, tk = c.journey.target_f, c.journey.target_k
        self.assertTrue(RANDOM_F[0] <= tf <= RANDOM_F[1])
        self.assertTrue(RANDOM_K[0] <= tk <= RANDOM_K[1])
        self.assertAlmostEqual(c.params.feed, f0 + (tf - f0) * 0.02)
        self.assertAlmostEqual(c.params.kill, k0 + (tk - k0) * 0.02)

    def test_random_walk_is_seeded(self):
        runs = []
        for _ in range(2):
            c = ParameterController(rng=np.random.default_rng(42))
            c.set_journey(JourneyType.RANDOM_WALK)
            for _ in range(300):
                c.tick(16)
            runs.append((c.params.feed, c.params.kill))
        self.assertEqual(runs[0], runs[1])

    def test_journeys_stay_in_domain(self):
        for journey in (JourneyType.LINEAR, JourneyType.CIRCULAR, JourneyType.FIGURE8, JourneyType.RANDOM_WALK):
            c = ParameterController(rng=np.random.default_rng(0))
            c.set_journey(journey, speed=50.0)
            for _ in range(500):
                c.tick(50)
                p = c.params
                self.assertTrue(0.0 <= p.feed <= 0.1, journey)
                self.assertTrue(0.0 <= p.kill <= 0.08, journey)

    def test_stop_journey(self):
        c = ParameterController()
        c.set_journey(JourneyType.CIRCULAR)
        c.tick(100)
        c.stop_journey()
        before = c.params
        c.tick(1000)
        self.assertEqual(c.params, before)
        self.assertIs(c.state, ControllerState.IDLE)

    def test_parse(self):
        self.assertIs(JourneyType.parse("Figure-8"), JourneyType.FIGURE8)
        self.assertIs(JourneyType.parse("random_walk"), JourneyType.RANDOM_WALK)
        self.assertIs(JourneyType.parse("random"), JourneyType.RANDOM_WALK)
        with self.assertRaises(ValueError):
            JourneyType.parse("spiral")
