# montecarlo/products/swaption.py
from .base import MonteCarloProduct


class SwaptionPhysical(MonteCarloProduct):
    """
    Physically settled swaption: at exercise_time the holder enters the
    underlying if its value exceeds the strike.

    The exercise decision is recorded as a barrier on the exercise value, so
    the reverse sweep differentiates through it with an indicator instead of
    dropping the branch. The payoff is deflated with the numeraire from the
    exercise time to evaluation_time (path-wise estimator; its average is
    the time-0 price).
    """

    def __init__(self, exercise_time: float, strike: float, underlying: MonteCarloProduct, descriptor=None):
        self.exercise_time = exercise_time
        self.strike = strike
        self.underlying = underlying
        self.descriptor = descriptor

    def price(self, evaluation_time: float, model):
        if evaluation_time > self.exercise_time:
            raise ValueError(f"Evaluation time {evaluation_time} is after exercise {self.exercise_time}")

        exercise_value = self.underlying.price(self.exercise_time, model) - self.strike
        payoff = exercise_value.barrier(exercise_value, 0.0)

        numeraire_at_exercise = model.get_numeraire(self.exercise_time)
        return payoff / numeraire_at_exercise * model.get_numeraire(evaluation_time)
