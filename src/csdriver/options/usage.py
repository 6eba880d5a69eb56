# Copyright 2026 CSDriver Contributors
# SPDX-License-Identifier: Apache-2.0

"""Help, about and version texts printed by informational options."""

from csdriver import __version__

# ###############
# Public Interface
# ###############

USAGE = """\
csdriver [options] source-files
   --about            About the compiler driver
   -addmodule:M1[,Mn] Adds the module to the generated assembly
   -checked[+|-]      Sets default arithmetic overflow context
   -codepage:ID       Sets code page to the one in ID (number, utf8, reset)
   -clscheck[+|-]     Disables CLS Compliance verifications
   -define:S1[;S2]    Defines one or more conditional symbols (short: -d)
   -debug[+|-], -g    Generate debugging information
   -delaysign[+|-]    Only insert the public key into the assembly (no signing)
   -doc:FILE          Process documentation comments to XML file
   -help              Lists all compiler options (short: -?)
   -keycontainer:NAME The key pair container used to sign the output assembly
   -keyfile:FILE      The key file used to strongname the output assembly
   -langversion:TEXT  Specifies language version modes: ISO-1, ISO-2, Default or LINQ
   -lib:PATH1[,PATHn] Specifies the location of referenced assemblies
   -main:CLASS        Specifies the class with the Main method (short: -m)
   -noconfig[+|-]     Disables implicit references to assemblies
   -nostdlib[+|-]     Does not reference the standard library
   -nowarn:W1[,Wn]    Suppress one or more compiler warnings
   -optimize[+|-]     Enables advanced compiler optimizations (short: -o)
   -out:FILE          Specifies output assembly name
   -pkg:P1[,Pn]       References packages P1..Pn
   -recurse:SPEC      Recursively compiles files according to SPEC pattern
   -reference:A1[,An] Imports metadata from the specified assembly (short: -r)
   -reference:ALIAS=A Imports metadata using specified extern alias (short: -r)
   -target:KIND       Specifies the format of the output assembly (short: -t)
                      KIND can be one of: exe, winexe, library, module
   -unsafe[+|-]       Allows to compile code which uses unsafe keyword
   -warnaserror[+|-]  Treats all warnings as errors
   -warn:0-4          Sets warning level, the default is 4 (short -w:)
   -help2             Shows internal compiler options

Resources:
   -linkresource:FILE[,ID] Links FILE as a resource (short: -linkres)
   -resource:FILE[,ID]     Embed FILE as a resource (short: -res)
   -win32res:FILE          Specifies Win32 resource file (.res)
   -win32icon:FILE         Use this icon for the output
   @file                   Read response file for more options

Options can be of the form -option or /option"""

OTHER_FLAGS = """\
Other flags in the compiler
   --fatal            Makes errors fatal
   --parse            Only parses the source file
   --tokenize         Only runs the tokenizer over the source file
   --stacktrace       Shows stack trace at error location
   --timestamp        Displays time stamps of various compiler events
   --expect-error X   Expect that error X will be encountered
   -v                 Verbose parsing (for debugging the parser)
   --mcs-debug X      Sets the debugging level to X"""

ABOUT = """\
csdriver is released under the terms of the Apache License 2.0.

It drives a staged compilation: command-line and response-file parsing,
reference and module resolution, resource collection, and the ordered
compiler phases that produce the output artifact."""


def version_text() -> str:
    """Return the ``--version`` banner."""
    return f"csdriver compiler driver version {__version__}"


def usage_text() -> str:
    return f"csdriver compiler driver {__version__}\n{USAGE}"
