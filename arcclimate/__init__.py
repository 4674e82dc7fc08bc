# -*- coding: utf-8 -*-
#
# Copyright 2023 ArcClimate

__version__ = "0.4.0"
