#!/usr/bin/env python
# coding=utf-8

"""Run the chronosca command line interface."""

from .chronosca import main

main(prog_name="chronosca")
