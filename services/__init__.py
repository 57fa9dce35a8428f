# -*- coding: utf-8 -*-
"""
Series Admin Service Layer
"""
