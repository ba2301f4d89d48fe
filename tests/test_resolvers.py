"""
Test cases for the second-pass letter resolvers.
"""
import math
import unittest

from fingerspell import ConfigurationError, InvalidInputError, RESOLVERS, resolve, validate_resolvers
from fingerspell.config import ResolverConfig
from fingerspell.resolvers import (
    resolve_aemnst, resolve_b, resolve_co, resolve_dgpqz, resolve_f, resolve_hkruv,
)
from fingerspell.types import AmbiguityClass, BoneType, FingerId

from tests.hand_factory import D, M, U, axes, make_hand


class TestAEMNST(unittest.TestCase):
    """Test the closed-fist family."""

    def setUp(self):
        self.params = ResolverConfig()
        self.d, self.n, self.side = axes()

    def test_thumb_beside_index_is_a(self):
        self.assertEqual(resolve_aemnst(make_hand((M, D, D, D, D)), self.params), 'A')

    def test_left_hand_a(self):
        self.assertEqual(resolve_aemnst(make_hand((M, D, D, D, D), is_right=False), self.params), 'A')

    def test_thumb_on_middle_tip_is_o(self):
        """Test that a tucked thumb touching the middle fingertip reads as O."""
        tip = 10 * self.d + 35 * self.n
        hand = make_hand((D, D, D, D, D), thumb_tip=tip)
        self.assertEqual(resolve_aemnst(hand, self.params), 'O')

    def test_thumb_across_fingers_rejected(self):
        """Test that a tucked thumb away from the middle fingertip is not resolved."""
        self.assertIsNone(resolve_aemnst(make_hand((D, D, D, D, D)), self.params))


class TestB(unittest.TestCase):
    """Test the flat hand."""

    def setUp(self):
        self.params = ResolverConfig()

    def test_fingers_together(self):
        self.assertEqual(resolve_b(make_hand((D, U, U, U, U)), self.params), 'B')

    def test_spread_finger_rejected(self):
        hand = make_hand((D, U, U, U, U), lateral=(60.0, 5.0, -5.0, -15.0))
        self.assertIsNone(resolve_b(hand, self.params))


class TestCO(unittest.TestCase):
    """Test the curved hand."""

    def setUp(self):
        self.params = ResolverConfig()
        self.d, self.n, self.side = axes()

    def test_closed_is_o(self):
        tip = 10 * self.side + 65 * self.d + 30 * self.n
        self.assertEqual(resolve_co(make_hand((M, M, M, M, M), thumb_tip=tip), self.params), 'O')

    def test_open_is_c(self):
        tip = 45 * self.side + 40 * self.d + 10 * self.n
        self.assertEqual(resolve_co(make_hand((M, M, M, M, M), thumb_tip=tip), self.params), 'C')


class TestDGPQZ(unittest.TestCase):
    """Test the index-pointing family, decided by hand orientation."""

    def setUp(self):
        self.params = ResolverConfig()
        self.states = (D, U, D, D, D)

    def test_side_on_is_g(self):
        """Test a right hand on its side, thumb up."""
        hand = make_hand(self.states, normal=(-1, 0, 0), direction=(0, 0, -1))
        self.assertEqual(resolve_dgpqz(hand, self.params), 'G')

    def test_palm_down_is_p(self):
        hand = make_hand(self.states, normal=(0, -1, 0), direction=(0, 0, -1))
        self.assertEqual(resolve_dgpqz(hand, self.params), 'P')

    def test_pointing_up_is_d(self):
        hand = make_hand(self.states, normal=(0, 0, 1), direction=(0, 1, 0))
        self.assertEqual(resolve_dgpqz(hand, self.params), 'D')

    def test_pointing_down_is_q(self):
        """Test a hand pointing down and forward with the palm 40 degrees from down."""
        b = math.radians(40)
        hand = make_hand(
            self.states,
            normal=(0, -math.cos(b), math.sin(b)),
            direction=(0, -math.sin(b), -math.cos(b)),
        )
        self.assertEqual(resolve_dgpqz(hand, self.params), 'Q')

    def test_other_orientation_rejected(self):
        hand = make_hand(self.states, normal=(1, 0, 0), direction=(0, 0, -1))
        self.assertIsNone(resolve_dgpqz(hand, self.params))

    def test_handedness_mirrors_g(self):
        """Test that the same orientation is G for a left hand."""
        hand = make_hand(self.states, normal=(1, 0, 0), direction=(0, 0, -1), is_right=False)
        self.assertEqual(resolve_dgpqz(hand, self.params), 'G')

    def test_g_checked_before_p(self):
        """Test that a side-on hand with a wide angle threshold still gives G first."""
        params = ResolverConfig(dgpqz_angle_deg=100.0)
        hand = make_hand(self.states, normal=(0, -1, 0), direction=(0, 0, -1))
        self.assertEqual(resolve_dgpqz(hand, params), 'G')


class TestF(unittest.TestCase):
    """Test the index-thumb circle."""

    def setUp(self):
        self.params = ResolverConfig()
        self.d, self.n, self.side = axes()

    def test_contact(self):
        tip = 20 * self.side + 10 * self.d + 25 * self.n
        self.assertEqual(resolve_f(make_hand((M, D, U, U, U), thumb_tip=tip), self.params), 'F')

    def test_no_contact(self):
        self.assertIsNone(resolve_f(make_hand((M, D, U, U, U)), self.params))


class TestHKRUV(unittest.TestCase):
    """Test the two-finger family."""

    def setUp(self):
        self.params = ResolverConfig()
        self.states = (D, U, U, D, D)
        self.d, self.n, self.side = axes()

    def test_together_is_u(self):
        self.assertEqual(resolve_hkruv(make_hand(self.states), self.params), 'U')

    def test_together_on_side_is_h(self):
        hand = make_hand(self.states, normal=(-1, 0, 0), direction=(0, 0, -1))
        self.assertEqual(resolve_hkruv(hand, self.params), 'H')

    def test_crossed_is_r(self):
        """Test index and middle touching but diverging by about 14 degrees."""
        crossed = {FingerId.INDEX: self.d - 0.25 * self.side}
        hand = make_hand(self.states, finger_directions=crossed)
        self.assertEqual(resolve_hkruv(hand, self.params), 'R')

    def test_spread_is_v(self):
        spread = {FingerId.INDEX: self.d + 0.4 * self.side}
        hand = make_hand(self.states, finger_directions=spread,
                         thumb_tip=60 * self.side + 20 * self.d + 20 * self.n)
        self.assertEqual(resolve_hkruv(hand, self.params), 'V')

    def test_spread_with_thumb_between_is_k(self):
        spread = {FingerId.INDEX: self.d + 0.4 * self.side}
        hand = make_hand(self.states, finger_directions=spread)
        index_centre = hand.finger(FingerId.INDEX).bone(BoneType.PROXIMAL).center
        middle_centre = hand.finger(FingerId.MIDDLE).bone(BoneType.PROXIMAL).center
        between = (index_centre + middle_centre) / 2 + 15 * self.n

        hand = make_hand(self.states, finger_directions=spread, thumb_tip=between)
        self.assertEqual(resolve_hkruv(hand, self.params), 'K')

    def test_h_takes_priority_over_r(self):
        """Test that tilt is checked before divergence."""
        d, n, side = axes(normal=(-1, 0, 0), direction=(0, 0, -1))
        hand = make_hand(self.states, normal=n, direction=d,
                         finger_directions={FingerId.INDEX: d - 0.25 * side})
        self.assertEqual(resolve_hkruv(hand, self.params), 'H')


class TestFixedResolvers(unittest.TestCase):
    """Test families that resolve to a single letter."""

    def test_fixed_letters(self):
        params = ResolverConfig()
        hand = make_hand()
        expected = {
            AmbiguityClass.IJ: 'I',
            AmbiguityClass.L: 'L',
            AmbiguityClass.W: 'W',
            AmbiguityClass.X: 'X',
            AmbiguityClass.Y: 'Y',
        }
        for ambiguity_class, letter in expected.items():
            self.assertEqual(resolve(ambiguity_class, hand, params), letter)


class TestDispatch(unittest.TestCase):
    """Test the resolver dispatch table."""

    def test_every_class_has_a_resolver(self):
        table = validate_resolvers(RESOLVERS)
        self.assertEqual(set(table), {c for c in AmbiguityClass if c.is_valid})

    def test_results_within_family(self):
        """Test that resolvers only ever return letters of their own family."""
        params = ResolverConfig()
        hands = [make_hand(), make_hand((D, U, U, D, D)), make_hand((M, M, M, M, M)),
                 make_hand((D, U, D, D, D), normal=(0, 0, 1), direction=(0, 1, 0))]
        for ambiguity_class in RESOLVERS:
            for hand in hands:
                letter = resolve(ambiguity_class, hand, params)
                if letter is not None and ambiguity_class is not AmbiguityClass.AEMNST:
                    self.assertIn(letter, ambiguity_class.candidates)

    def test_missing_resolver_rejected(self):
        partial = dict(RESOLVERS)
        del partial[AmbiguityClass.B]
        del partial[AmbiguityClass.Y]
        with self.assertRaises(ConfigurationError) as ctx:
            validate_resolvers(partial)
        self.assertIn("B", str(ctx.exception))
        self.assertIn("Y", str(ctx.exception))

    def test_invalid_class_resolver_rejected(self):
        table = dict(RESOLVERS)
        table[AmbiguityClass.INVALID] = lambda hand, params: None
        with self.assertRaises(ConfigurationError):
            validate_resolvers(table)

    def test_invalid_class_resolves_to_none(self):
        self.assertIsNone(resolve(AmbiguityClass.INVALID, None, ResolverConfig()))

    def test_missing_frame_rejected(self):
        with self.assertRaises(InvalidInputError):
            resolve(AmbiguityClass.B, None, ResolverConfig())


if __name__ == '__main__':
    unittest.main()
