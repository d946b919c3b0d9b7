"""Signal analysis kernels (FFT, windows, spectral and fractal estimators).

Modules here operate on NumPy arrays of samples and stay free of I/O so they
can be reused from scripts, tests, or the streaming pipeline alike:
- :mod:`fit` and :mod:`complex_math` hold the shared numeric helpers.
- :mod:`windows` and :mod:`fft` build the frequency transform.
- :mod:`spectral` and :mod:`fractal` expose the two analyzers.
- :mod:`features` defines the immutable result records.
"""
