import textwrap
from typing import Optional, Union

from pydantic import BaseModel

INDENT = "    "


def indent(code: str) -> str:
    return textwrap.indent(code, INDENT)


def docstring(*parts: Optional[str]) -> str:
    """Docstring из непустых частей, разделенных пустой строкой"""
    text = "\n\n".join(part.strip() for part in parts if part and part.strip())
    if not text:
        return ""

    text = text.replace('"""', '\\"\\"\\"')
    if "\n" not in text:
        return f'"""{text}"""'

    return f'"""{text}\n"""'


class Parameter(BaseModel):
    name: str

    default: Optional[str] = None
    var_type: Optional[str] = None

    order: int = 0

    def __str__(self):
        return (
            self.name
            + (f": {self.var_type}" if self.var_type else "")
            + (f" = {self.default}" if self.default is not None else "")
        )


class CodeBlock(BaseModel):
    order: int = 0
    code: str = "pass"

    def __str__(self):
        return self.code.replace("\t", INDENT)


class Function(BaseModel):
    name: str
    parameters: list[Parameter] = []
    response: str = "None"

    description: Optional[str] = None

    code: CodeBlock = CodeBlock(order=0, code="pass")
    order: int = 0

    def __str__(self) -> str:
        # Параметры без значения по умолчанию идут первыми, порядок внутри сохраняется
        parameters = sorted(self.parameters, key=lambda x: x.default is not None)

        if len(parameters) > 1:
            signature = (
                "(\n" + "".join(f"{INDENT}{parameter},\n" for parameter in parameters) + ")"
            )
        else:
            signature = "(" + ", ".join(map(str, parameters)) + ")"

        body = "\n".join(filter(bool, [docstring(self.description), str(self.code)]))

        return f"def {self.name}{signature} -> {self.response}:\n" + indent(body)

    def set_code_block(self, code_block: Union["CodeBlock", str]) -> "Function":
        if isinstance(code_block, str):
            code_block = CodeBlock(code=code_block)

        self.code = code_block
        return self


class Class(BaseModel):
    name: str

    functions: dict[str, "Function"] = {}
    parameters: list[Parameter] = []

    inherits: list[str] = []
    description: Optional[str] = None

    order: int = 0

    def __str__(self) -> str:
        members = sorted(self.functions.values(), key=lambda x: x.order, reverse=True)

        sections = [
            docstring(self.description),
            "\n".join(map(str, self.parameters)),
            *map(str, members),
        ]
        body = "\n\n".join(filter(bool, sections)) or "pass"

        return (
            f"class {self.name}"
            + (f"({', '.join(self.inherits)})" if self.inherits else "")
            + ":\n"
            + indent(body)
        )

    def add_function(self, function: Union["Function", str], **kwargs) -> "Function":
        if isinstance(function, str):
            function = Function(name=function, **kwargs)

        self.functions[function.name] = function
        return function


class CodeFile(BaseModel):
    file_name: str

    imports: list[str] = []
    classes: dict[str, "Class"] = {}
    code_blocks: list["CodeBlock"] = []

    def __str__(self):
        members = sorted(
            self.code_blocks + list(self.classes.values()),
            key=lambda x: x.order,
            reverse=True,
        )

        sections = [
            "\n".join(self.imports) if self.imports else "",
            "\n\n\n".join(map(str, members)),
        ]

        text = "\n\n\n".join(filter(bool, sections)).replace("\t", INDENT)
        return text + "\n" if text else ""

    def add_class(self, cls: Union["Class", str], **kwargs) -> "Class":
        if isinstance(cls, str):
            cls = Class(name=cls, **kwargs)

        self.classes[cls.name] = cls
        return cls

    def add_code_block(self, code_block: Union["CodeBlock", str], **kwargs) -> "CodeFile":
        if isinstance(code_block, str):
            code_block = CodeBlock(code=code_block, **kwargs)

        self.code_blocks.append(code_block)
        return self

    def add_import(self, line: str) -> "CodeFile":
        if line not in self.imports:
            self.imports.append(line)

        return self


class Project(BaseModel):
    name: str
    files: list[CodeFile] = []

    def add_file(self, file_name: Union["CodeFile", str], **kwargs) -> "CodeFile":
        if isinstance(file_name, str):
            file_name = CodeFile(file_name=file_name, **kwargs)

        self.files.append(file_name)
        return file_name

    def get_file(self, file_name: str) -> Optional[CodeFile]:
        for code_file in self.files:
            if code_file.file_name == file_name:
                return code_file

        return None
