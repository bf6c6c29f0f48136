import logging
import os
import re
from collections import defaultdict
from typing import Dict, Iterable, List, Set

from ...config import GeneratorConfig
from ..types.models import Artifact, DtoArtifact, DtoField, RequestArtifact, RequestParameter
from .code_models import Class, CodeBlock, CodeFile, Parameter, Project
from .templates import templates

logger = logging.getLogger(__name__)

NON_OPTIONAL_TYPES = {"Any", "None"}


def optional(type_str: str) -> str:
    if type_str in NON_OPTIONAL_TYPES or type_str.startswith("Optional["):
        return type_str

    return f"Optional[{type_str}]"


def relative_import(current_module: str, target_module: str) -> str:
    """
    Относительный путь импорта между модулями пакета.

    Examples:
        >>> relative_import("sdk.responses.users", "sdk.dto")
        '..dto'
        >>> relative_import("sdk.requests.users", "sdk.requests.orders")
        '.orders'
    """
    current_package = current_module.split(".")[:-1]
    target_parts = target_module.split(".")

    common = 0
    for current_part, target_part in zip(current_package, target_parts):
        if current_part != target_part:
            break
        common += 1

    return "." * (len(current_package) - common + 1) + ".".join(target_parts[common:])


class PythonPrinter:
    """Печать артефактов в исходный код Python: pydantic DTO и httpx запросы"""

    def __init__(self, config: GeneratorConfig = None):
        self.config = config or GeneratorConfig()

    @property
    def lib_module(self) -> str:
        return self.config.module_path("lib", "request")

    def print_project(self, artifacts: Iterable[Artifact]) -> Project:
        """Сборка файлов проекта из артефактов"""
        artifacts = list(artifacts)

        self._files: Dict[str, CodeFile] = {}
        self._imports: Dict[str, Dict[str, Set[str]]] = defaultdict(lambda: defaultdict(set))
        self._rebuild: Dict[str, List[str]] = defaultdict(list)
        self._locations = {artifact.type_name: artifact.namespace for artifact in artifacts}
        self._aliases = {
            artifact.type_name
            for artifact in artifacts
            if isinstance(artifact, DtoArtifact) and artifact.alias_of is not None
        }

        self._module(self.lib_module, []).add_code_block(CodeBlock(code=templates.request))

        for artifact in artifacts:
            if isinstance(artifact, DtoArtifact):
                self._print_dto(artifact)
            else:
                self._print_request(artifact)

        return self._finalize(artifacts)

    def file_name(self, module: str) -> str:
        """sdk_client.responses.users -> responses/users.py"""
        base = self.config.namespace.split(".")
        parts = module.split(".")[len(base):]

        if not parts:
            return "__init__.py"

        return os.path.join(*parts[:-1], f"{parts[-1]}.py")

    def _module(self, module: str, imports: List[str]) -> CodeFile:
        if module not in self._files:
            self._files[module] = CodeFile(
                file_name=self.file_name(module), imports=list(imports)
            )

        return self._files[module]

    def _import(self, module: str, names: Iterable[str]):
        for name in names:
            target = self._locations.get(name)
            if target is None:
                logger.debug("Тип %s не сгенерирован, импорт пропущен", name)
                continue

            if target != module:
                self._imports[module][target].add(name)

    def _print_dto(self, artifact: DtoArtifact):
        module = artifact.namespace
        code_file = self._module(module, templates.dto_imports)

        if artifact.alias_of is not None:
            # Псевдонимы после классов: могут ссылаться на них
            code_file.add_code_block(
                CodeBlock(code=f"{artifact.type_name} = {artifact.alias_of}", order=-10)
            )
            self._import(module, artifact.alias_of.dto_names())
            return

        model_class = code_file.add_class(
            artifact.type_name,
            inherits=["BaseModel"],
            description="\n\n".join(
                filter(bool, [artifact.doc_title, artifact.doc_description])
            ),
        )

        if artifact.name_mappings:
            model_class.parameters.append(
                Parameter(name="model_config", default="ConfigDict(populate_by_name=True)")
            )

        for field in artifact.fields:
            model_class.parameters.append(self._dto_field(field))
            self._import(module, field.type.dto_names())

        self._rebuild[module].append(artifact.type_name)

    @staticmethod
    def _dto_field(field: DtoField) -> Parameter:
        field_type = str(field.type)
        default = "None" if field.nullable else None

        if field.nullable:
            field_type = optional(field_type)

        # Имя на проводе отличается - сохраняем его через alias
        if field.maps_name:
            if default:
                default = f"Field(default={default}, alias={field.original_name!r})"
            else:
                default = f"Field(alias={field.original_name!r})"

        return Parameter(name=field.normalized_name, var_type=field_type, default=default)

    def _print_request(self, artifact: RequestArtifact):
        module = artifact.namespace
        code_file = self._module(module, templates.request_imports)
        self._imports[module][self.lib_module].add("Request")

        request_class = code_file.add_class(
            artifact.type_name,
            inherits=["Request"],
            description="\n\n".join(
                filter(bool, [artifact.doc_title, artifact.doc_description])
            ),
        )

        request_class.parameters.append(
            Parameter(name="method", default=repr(artifact.http_method.value))
        )
        if artifact.has_body:
            request_class.parameters.append(Parameter(name="has_body", default="True"))

        parameters = artifact.parameter_groups.ordered()
        for parameter in parameters:
            self._import(module, parameter.type.dto_names())

        request_class.add_function(
            "__init__",
            parameters=[Parameter(name="self")]
            + [self._init_parameter(parameter) for parameter in parameters],
            order=10,
        ).set_code_block(
            "\n".join(
                f"self.{parameter.normalized_name} = {parameter.normalized_name}"
                for parameter in parameters
            )
            or "pass"
        )

        path = re.sub(r"\{(\w+)\}", r"{self.\1}", artifact.path_template)
        request_class.add_function(
            "resolve_endpoint",
            parameters=[Parameter(name="self")],
            response="str",
            order=9,
        ).set_code_block(
            f'return f"{path}"' if path != artifact.path_template else f'return "{path}"'
        )

        for accessor in artifact.accessors:
            group = getattr(artifact.parameter_groups, accessor.group)
            lines = ["return self.filter_unset(", "\t{"]
            lines += [
                f"\t\t{parameter.original_name!r}: self.{parameter.normalized_name},"
                for parameter in group
            ]
            lines += ["\t}", ")"]

            request_class.add_function(
                accessor.name,
                parameters=[Parameter(name="self")],
                response="Dict[str, Any]",
                order=8,
            ).set_code_block("\n".join(lines))

        if artifact.creates_dto:
            self._add_dispatch(module, code_file, request_class, artifact)

    @staticmethod
    def _init_parameter(parameter: RequestParameter) -> Parameter:
        var_type = str(parameter.type)

        if parameter.default is not None:
            default = repr(parameter.default)
        elif not parameter.required:
            default = "None"
        else:
            default = None

        if not parameter.required:
            var_type = optional(var_type)

        return Parameter(name=parameter.normalized_name, var_type=var_type, default=default)

    def _add_dispatch(
        self,
        module: str,
        code_file: CodeFile,
        request_class: Class,
        artifact: RequestArtifact,
    ):
        self._imports[module][self.lib_module].add("UnexpectedStatusError")

        lines = ["match response.status_code:"]
        for entry in artifact.response_dispatch:
            self._import(module, entry.type.dto_names())

            lines.append(f"\tcase {entry.status}:")
            if not entry.is_model or entry.dto_type_name in self._aliases:
                code_file.add_import("from pydantic import TypeAdapter")
                lines.append(
                    f"\t\treturn TypeAdapter({entry.dto_type_name})"
                    ".validate_python(response.json())"
                )
            else:
                lines.append(
                    f"\t\treturn {entry.dto_type_name}.model_validate(response.json())"
                )
        lines.append("")
        lines.append("raise UnexpectedStatusError(response, self.resolve_endpoint())")

        if len(artifact.return_types) > 1:
            response_type = f"Union[{', '.join(artifact.return_types)}]"
        else:
            response_type = artifact.return_types[0]

        request_class.add_function(
            "create_dto_from_response",
            parameters=[
                Parameter(name="self"),
                Parameter(name="response", var_type="httpx.Response"),
            ],
            response=response_type,
            order=7,
        ).set_code_block("\n".join(lines))

    def _finalize(self, artifacts: List[Artifact]) -> Project:
        project = Project(name=self.config.namespace)

        for module, names in self._rebuild.items():
            self._files[module].add_code_block(
                CodeBlock(
                    code="\n".join(f"{name}.model_rebuild()" for name in names),
                    order=-100,
                )
            )

        for module, targets in self._imports.items():
            code_file = self._files[module]
            code_file.imports.append("")
            for target in sorted(targets):
                names = ", ".join(sorted(targets[target]))
                code_file.imports.append(
                    f"from {relative_import(module, target)} import {names}"
                )

        # Главный __init__.py экспортирует все запросы
        init_module = self.config.module_path("__init__")
        main_init = CodeFile(file_name="__init__.py")
        main_init.imports.append(
            f"from {relative_import(init_module, self.lib_module)}"
            " import Request, UnexpectedStatusError"
        )
        exported = ["Request", "UnexpectedStatusError"]

        for artifact in artifacts:
            if isinstance(artifact, RequestArtifact):
                main_init.imports.append(
                    f"from {relative_import(init_module, artifact.namespace)}"
                    f" import {artifact.type_name}"
                )
                exported.append(artifact.type_name)
        main_init.add_code_block(CodeBlock(code=f"__all__ = {exported!r}"))

        project.add_file(main_init)

        packages = set()
        for code_file in self._files.values():
            project.add_file(code_file)
            packages.update(self._package_inits(code_file.file_name))

        for package_init in sorted(packages):
            if project.get_file(package_init) is None:
                project.add_file(package_init)

        if self.config.url:
            project.add_file("sdk.toml").add_code_block(
                CodeBlock(
                    code=templates.config.format(
                        url=self.config.url, namespace=self.config.namespace
                    )
                )
            )

        return project

    @staticmethod
    def _package_inits(file_name: str) -> Set[str]:
        parts = file_name.split(os.sep)[:-1]
        return {
            os.path.join(*parts[: i + 1], "__init__.py") for i in range(len(parts))
        }
