from __future__ import annotations

COCOA_RTF = (
    "{\\rtf1\\ansi\\ansicpg1252\\cocoartf2822\n"
    "\\cocoatextscaling0\\cocoaplatform0{\\fonttbl\\f0\\fnil\\fcharset0 HelveticaNeue-Bold;}\n"
    "{\\colortbl;\\red255\\green255\\blue255;\\red0\\green0\\blue0;}\n"
    "{\\*\\expandedcolortbl;;\\csgray\\c0;}\n"
    "\\pard\\pardirnatural\\qc\\partightenfactor0\n"
    "\n"
    "\\f0\\b\\fs120 \\cf2 \\strokec3 We\\'92re reaching out\\\n"
    "to You}"
)
COCOA_PLAIN = "We’re reaching out to You"

SIMPLE_RTF = "{\\rtf1\\ansi{\\fonttbl\\f0\\fnil Helvetica;}\\f0\\fs48 \\cf2 Amazing grace}"
SIMPLE_BASE = SIMPLE_RTF.index("Amazing")
