"""
Frequency Response Sampling

Bode (magnitude/phase vs frequency) and Nyquist (real/imag vs frequency)
data for the supported model families, evaluated on logarithmic sweeps from
0.01 to 100 rad/s.
"""

from .frequency_response_sampler import (
    FrequencyResponseSampler,
    FrequencySweepConfig,
    FrequencySample,
    NyquistSample,
    BODE_SWEEP,
    NYQUIST_SWEEP,
)

__all__ = [
    'FrequencyResponseSampler',
    'FrequencySweepConfig',
    'FrequencySample',
    'NyquistSample',
    'BODE_SWEEP',
    'NYQUIST_SWEEP',
]
