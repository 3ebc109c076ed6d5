# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""RainMaker sprinkler controller protocol tools."""

__version__ = "0.1.0"
