"""Constants and default values for head pose tracking."""

import numpy as np

# Live2D v3 standard parameter names driven by the head tracker
PARAM_ANGLE_X = "ParamAngleX"
PARAM_ANGLE_Y = "ParamAngleY"
PARAM_ANGLE_Z = "ParamAngleZ"

# Parameter value ranges (used when the model does not report its own)
PARAM_RANGES = {
    PARAM_ANGLE_X: (-30.0, 30.0),
    PARAM_ANGLE_Y: (-30.0, 30.0),
    PARAM_ANGLE_Z: (-30.0, 30.0),
}

# Number of points in the iBUG / dlib 68-point layout
NUM_LANDMARKS = 68

# Specific landmark points used by normalization and pose estimation
LANDMARK_POINTS = {
    "nose_tip": 30,
    "chin": 8,
    "nose_base": 33,
    "left_eye_pair": [38, 41],      # Upper/lower lid, averaged into one eye point
    "right_eye_pair": [43, 46],
    "mouth_left": 48,
    "mouth_right": 54,
    "ear_left": 0,                  # Jaw ends stand in for the ears
    "ear_right": 16,
}

# 3D face model (millimeters) matching the anchor order:
# left eye, right eye, nose, left mouth corner, right mouth corner, left ear, right ear
FACE_MODEL_POINTS = np.array([
    [-31.0, 72.0, 86.0],
    [31.0, 72.0, 86.0],
    [0.0, 40.0, 114.0],
    [-20.0, 15.0, 90.0],
    [20.0, 15.0, 90.0],
    [-69.0, 76.0, -2.0],
    [69.0, 76.0, -2.0],
], dtype=np.float64)
FACE_MODEL_POINTS.flags.writeable = False

# Default tracker settings
DEFAULT_NORM_WIDTH = 200.0
DEFAULT_NORM_HEIGHT = 200.0
DEFAULT_POSITION_LOW_PASS = 4.0
DEFAULT_ROTATION_LOW_PASS = 2.0
DEFAULT_INTERPOLATION_FACTOR = 0.2
DEFAULT_NEAR_CLIP = 0.3
DEFAULT_FAR_CLIP = 2000.0

# MediaPipe 478-point indices that best match each of the 68 dlib points
MEDIAPIPE_TO_68 = [
    # Jaw (0-16)
    162, 234, 93, 58, 172, 136, 149, 148, 152, 377, 378, 365, 397, 288, 323, 454, 389,
    # Eyebrows (17-26)
    71, 63, 105, 66, 107, 336, 296, 334, 293, 301,
    # Nose bridge and lower nose (27-35)
    168, 197, 5, 4, 75, 97, 2, 326, 305,
    # Eyes (36-47)
    33, 160, 158, 133, 153, 144, 362, 385, 387, 263, 373, 380,
    # Outer lips (48-59)
    61, 39, 37, 0, 267, 269, 291, 405, 314, 17, 84, 181,
    # Inner lips (60-67)
    78, 82, 13, 312, 308, 317, 14, 87,
]
