"""
Configuration and default parameters for chunked QNN witness sweeps.
"""

import numpy as np

# Default sweep parameters
DEFAULT_COUNT = 1000
DEFAULT_EPOCHS = 4
DEFAULT_TIME_CHUNKS = 4
DEFAULT_COUNT_STEP = 50

# Final evolution time T_f
DEFAULT_FINAL_TIME = 1.580 / (8 * np.pi)

# Trained Hamiltonian parameters, one entry per time chunk
#   H = K_A σ_xA + K_B σ_xB + ε_A σ_zA + ε_B σ_zB + ζ σ_zA σ_zB
TUNNELING_A = (2.4886, 2.4730, 2.4852, 2.4949)
TUNNELING_B = (2.4886, 2.4730, 2.4852, 2.4949)
BIAS_A = (0.092889, 0.11577, 0.095443, 0.083292)
BIAS_B = (0.092889, 0.11577, 0.095443, 0.083292)
COUPLING = (0.03820, 0.12759, 0.11692, 0.038180)

# Preset training states, amplitudes in basis |00⟩, |01⟩, |10⟩, |11⟩
DEFAULT_LABELS = ["Bell", "Flat", "C", "P"]
DEFAULT_TARGETS = [-1.0, 0.0, 0.0, 0.663325]
DEFAULT_STATES = [
    [1 / np.sqrt(2), 0.0, 0.0, 1 / np.sqrt(2)],   # (|00⟩ + |11⟩)/√2
    [0.5, 0.5, 0.5, 0.5],                          # flat superposition
    [1.0, 0.0, 0.0, 0.0],                          # |00⟩ (classical)
    [1 / np.sqrt(3), 1 / np.sqrt(3), 1 / np.sqrt(3), 0.0],  # (|00⟩+|01⟩+|10⟩)/√3
]

# Number of two-qubit basis amplitudes in the input ansatz
STATE_DIMENSION = 4

# CSV header block
CSV_TITLE = "Chunked QNN Test"
CSV_CONFIG_FIELDS = ["Time Chunks", "T_f", "Count", "Epochs"]
CSV_TARGETS_LABEL = "Targets"

# Output naming
BASE_FILE_NAME = "qnn_witness"
FILE_NAME_EXT = ".csv"

# Console formats
VALUE_FORMAT = "{:11.7f}"
INDEX_FORMAT = "{:07d}"
GAMMA_LABEL_FORMAT = "{:+.2f}{:+.2f}i"

# Numerical tolerances
NORMALIZATION_TOLERANCE = 1e-10
