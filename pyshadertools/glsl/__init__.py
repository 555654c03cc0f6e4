"""
This directory contains glsl templates used when assembling shaders. They are
available to templates via ``{$ include 'pyshadertools.<name>.glsl' $}``.
"""
