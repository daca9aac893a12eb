# Copyright (c) 2026 Mohamad Al-Zawahreh (dba Sovereign Systems).
#
# This file is part of setstr.
#
# LICENSE: DUAL-LICENSED (AGPLv3 or COMMERCIAL).

import logging
import os
import re
import time

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedInput
from lark.lark import PostLex

from setstr.config import settings
from setstr.errors import GoSyntaxError

logger = logging.getLogger("setstr.parser")

GRAMMAR_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "go.lark")

# Token kinds after which a line break ends the statement.
_SEMI_AFTER_TYPES = {"NAME", "NUMBER", "RUNE", "STRING", "RAW_STRING"}
_SEMI_AFTER_VALUES = {")", "]", "}", "++", "--"}

# A type parameter name is followed by its constraint or by another name.
_TYPE_PARAM_FOLLOW = re.compile(r"\s*(?:[^\W\d]|~|,)")


class GoSemicolons(PostLex):
    """Inserts the semicolons the Go lexer adds at line ends."""

    always_accept = ("NEWLINE", "BLOCK_COMMENT")

    def process(self, stream):
        last = None
        for token in stream:
            if token.type == "BLOCK_COMMENT":
                if "\n" not in token.value:
                    continue
            if token.type in ("NEWLINE", "BLOCK_COMMENT"):
                if last is not None and self._ends_statement(last):
                    last = Token.new_borrow_pos("_SEMI", ";", token)
                    yield last
                continue
            last = token
            yield token

        if last is not None and self._ends_statement(last):
            yield Token.new_borrow_pos("_SEMI", ";", last)

    @staticmethod
    def _ends_statement(token):
        if token.type in _SEMI_AFTER_TYPES:
            return True
        return token.value in _SEMI_AFTER_VALUES


class GoTransformer(Transformer):
    def __init__(self, source, source_file="<unknown>"):
        super().__init__()
        self.source = source
        self.source_file = source_file
        self.node_count = 0

    def _add_meta(self, node, meta):
        self.node_count += 1
        if meta and not meta.empty:
            node["line"] = meta.line
            node["column"] = meta.column
        node["file"] = self.source_file
        return node

    def start(self, args):
        imports = []
        types = []
        for a in args[1:]:
            if a["type"] == "import_decl":
                imports.extend(a["specs"])
            elif a["type"] == "type_decl":
                types.extend(a["specs"])
        return {
            "type": "file",
            "file": self.source_file,
            "package": args[0],
            "imports": imports,
            "types": types,
        }

    def package_clause(self, args):
        return str(args[0])

    # ─── Imports ────────────────────────────────────────────────────────────

    def import_decl(self, args):
        return {"type": "import_decl", "specs": list(args)}

    @v_args(meta=True)
    def import_spec(self, meta, args):
        alias = str(args[0]) if len(args) > 1 else None
        return self._add_meta({"type": "import", "alias": alias, "path": args[-1]}, meta)

    @v_args(meta=True)
    def dot_import(self, meta, args):
        return self._add_meta({"type": "import", "alias": ".", "path": args[0]}, meta)

    def import_path(self, args):
        value = str(args[0])
        if value.startswith("`"):
            value = '"%s"' % value[1:-1]
        return value

    # ─── Declarations ───────────────────────────────────────────────────────

    def type_decl(self, args):
        return {"type": "type_decl", "specs": list(args)}

    @v_args(meta=True)
    def type_spec(self, meta, args):
        name = str(args[0])
        decl_type = args[-1]
        type_params = []
        if decl_type["type"] == "array" and decl_type["type_params"]:
            type_params = decl_type["type_params"]
            decl_type = decl_type["elem"]
        return self._add_meta({
            "type": "type_spec",
            "name": name,
            "decl_type": decl_type,
            "type_params": type_params,
        }, meta)

    @v_args(meta=True)
    def generic_alias(self, meta, args):
        return self._add_meta({
            "type": "type_spec",
            "name": str(args[0]),
            "decl_type": args[-1],
            "type_params": self._type_params(args[1:-1]),
        }, meta)

    @v_args(meta=True)
    def other_decl(self, meta, args):
        return self._add_meta({"type": "other_decl"}, meta)

    # ─── Types ──────────────────────────────────────────────────────────────

    @v_args(meta=True)
    def type_name(self, meta, args):
        return self._named(meta, args)

    def _named(self, meta, args):
        type_args = []
        if args and isinstance(args[-1], list):
            type_args = args[-1]
            args = args[:-1]
        if len(args) == 2:
            node = {"type": "selector", "package": str(args[0]), "name": str(args[1])}
        else:
            node = {"type": "ident", "name": str(args[0])}
        node["type_args"] = type_args
        return self._add_meta(node, meta)

    def type_args(self, args):
        return list(args)

    @v_args(meta=True)
    def pointer_type(self, meta, args):
        return self._add_meta({"type": "pointer", "elem": args[0]}, meta)

    @v_args(meta=True)
    def slice_type(self, meta, args):
        return self._add_meta({"type": "slice", "elem": args[0]}, meta)

    @v_args(meta=True)
    def array_type(self, meta, args):
        # `type P[T any] struct{...}` and `type A [N]int` share a shape; a
        # leading name followed by another name, `~` or `,` means parameters.
        tokens = [a for a in args[:-1] if isinstance(a, Token)]
        return self._add_meta({
            "type": "array",
            "length": " ".join(str(t) for t in tokens),
            "type_params": self._type_params(tokens),
            "elem": args[-1],
        }, meta)

    def _type_params(self, tokens):
        first = tokens[0] if tokens else None
        if first is None or first.type != "NAME":
            return []
        if not _TYPE_PARAM_FOLLOW.match(self.source, first.end_pos):
            return []
        text = self.source[first.start_pos:tokens[-1].end_pos]
        return [p.split()[0] for p in text.split(",") if p.split()]

    @v_args(meta=True)
    def map_type(self, meta, args):
        return self._add_meta({"type": "map", "key": args[0], "elem": args[1]}, meta)

    @v_args(meta=True)
    def chan_type(self, meta, args):
        return self._add_meta({"type": "chan", "elem": args[-1]}, meta)

    @v_args(meta=True)
    def recv_chan_type(self, meta, args):
        return self._add_meta({"type": "chan", "elem": args[-1]}, meta)

    @v_args(meta=True)
    def func_type(self, meta, args):
        return self._add_meta({"type": "func"}, meta)

    @v_args(meta=True)
    def interface_type(self, meta, args):
        return self._add_meta({"type": "interface"}, meta)

    @v_args(meta=True)
    def struct_type(self, meta, args):
        return self._add_meta({"type": "struct", "fields": list(args)}, meta)

    @v_args(meta=True)
    def field(self, meta, args):
        names = args[0] if isinstance(args[0], list) else [str(args[0])]
        tag = args[2] if len(args) > 2 else None
        return self._add_meta({
            "type": "field",
            "names": names,
            "field_type": args[1],
            "tag": tag,
        }, meta)

    @v_args(meta=True)
    def embedded_generic(self, meta, args):
        # the tag is the only child that is not a token
        tag = None
        if not isinstance(args[-1], Token):
            tag = args[-1]
            args = args[:-1]
        node = self._add_meta({"type": "ident", "name": str(args[0]), "type_args": []}, meta)
        return self._add_meta({
            "type": "field",
            "names": [],
            "field_type": node,
            "tag": tag,
        }, meta)

    @v_args(meta=True)
    def embedded_field(self, meta, args):
        tag = args[1] if len(args) > 1 else None
        return self._add_meta({
            "type": "field",
            "names": [],
            "field_type": args[0],
            "tag": tag,
        }, meta)

    def name_list(self, args):
        return [str(t) for t in args]

    @v_args(meta=True)
    def embedded(self, meta, args):
        return self._named(meta, args)

    @v_args(meta=True)
    def embedded_pointer(self, meta, args):
        return self._add_meta({"type": "pointer", "elem": self._named(meta, args)}, meta)

    def tag(self, args):
        return str(args[0])


class GoParser:
    _parsers = {}

    def __init__(self, grammar_path=GRAMMAR_PATH):
        self.grammar_path = grammar_path
        if grammar_path not in self._parsers:
            with open(grammar_path, "r", encoding="utf-8") as f:
                grammar = f.read()
            self._parsers[grammar_path] = Lark(
                grammar,
                start="start",
                parser="lalr",
                lexer="basic",
                postlex=GoSemicolons(),
                propagate_positions=True,
                maybe_placeholders=False,
            )
        self.parser = self._parsers[grammar_path]

    def parse(self, code, source_file="<unknown>"):
        """
        Parses Go source into a dict tree.

        Returns the "file" node. Raises GoSyntaxError when the source does
        not parse; there is no recovery.
        """
        start_time = time.time()

        # a leading byte order mark is not part of the source
        if code.startswith("\ufeff"):
            code = code[1:]

        try:
            tree = self.parser.parse(code)
        except UnexpectedInput as e:
            raise GoSyntaxError(source_file, e.line, e.column, _describe(e)) from e

        transformer = GoTransformer(code, source_file)
        ast = transformer.transform(tree)

        if settings.PARSE_DEBUG:
            dur = (time.time() - start_time) * 1000
            logger.debug("parsed %s: %d bytes in %.2fms, %d nodes",
                         source_file, len(code), dur, transformer.node_count)
        return ast


def _describe(error):
    token = getattr(error, "token", None)
    if token is not None:
        if token.type == "$END":
            return "unexpected end of file"
        return "unexpected %r" % str(token)
    char = getattr(error, "char", None)
    if char is not None:
        return "unexpected character %r" % char
    return str(error)
