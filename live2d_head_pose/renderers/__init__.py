"""Avatar renderers.

Import from the backend module directly; it needs the live2d extra:

    from live2d_head_pose.renderers.live2d_renderer import Live2DRenderer
"""
