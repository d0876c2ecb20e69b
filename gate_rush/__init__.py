"""
Gate Rush
=========

A three-lane arcade runner: steer through falling arithmetic gates to grow
the score to the target without letting it drop to zero.

All gameplay tuning lives in game_config.yaml.
"""
