import argparse
import glob
import json
import logging
import os
import sys
from typing import List, Tuple

import httpx

from sdk_generator.config import CONFIG_FILE_NAME, GeneratorConfig
from sdk_generator.generator import SdkGenerator
from sdk_generator.internal.errors import GenerationError, SpecificationError
from sdk_generator.internal.printer.code_models import Project


def confirm_choice(message: str) -> bool:
    """Запрос подтверждения у пользователя"""
    while True:
        choice = input(f"{message} (y/n): ").lower().strip()
        if choice in ["y", "yes", "да", ""]:
            return True
        elif choice in ["n", "no", "нет"]:
            return False
        print("Введите y/n")


def select_from_menu(options: List[str], title: str) -> int:
    """Выбор пункта из меню"""
    print(f"\n{title}")
    for i, option in enumerate(options, 1):
        print(f"[{i}] {option}")

    while True:
        try:
            choice = int(input("\nВыберите пункт: "))
            if 1 <= choice <= len(options):
                return choice - 1
            print(f"Введите число от 1 до {len(options)}")
        except ValueError:
            print("Введите корректное число")


def find_sdk_packages() -> List[Tuple[str, GeneratorConfig]]:
    """Поиск SDK пакетов по файлам конфигурации"""
    packages = []

    for config_file in glob.glob(f"**/{CONFIG_FILE_NAME}", recursive=True):
        config = GeneratorConfig.from_file(config_file)

        if config:
            packages.append((os.path.dirname(config_file), config))

    return packages


def interactive_find_packages():
    """Интерактивный поиск и обновление SDK пакетов"""
    print("🔍 Поиск SDK пакетов...")
    packages = find_sdk_packages()

    if not packages:
        print("❌ SDK пакеты не найдены")
        return

    print(f"✅ Найдено {len(packages)} SDK пакетов:")

    selected_idx = select_from_menu(
        [f"{config_dir} ({config.url})" for config_dir, config in packages],
        "📦 Найденные SDK пакеты:",
    )
    selected_dir, selected_config = packages[selected_idx]

    print(f"\n📍 Выбран пакет: {selected_dir}")
    print(f"   URL: {selected_config.url}")
    print(f"   Namespace: {selected_config.namespace}")

    _generate_sdk_in_existing(selected_config, selected_dir)


def load_specification(url: str) -> dict:
    """Загрузка OpenAPI спецификации из файла или по URL"""
    if url.startswith(("http://", "https://")):
        response = httpx.get(url, follow_redirects=True)
        response.raise_for_status()
        return response.json()

    if os.path.exists(url):
        with open(url, "r", encoding="utf-8") as f:
            return json.load(f)

    raise SpecificationError(
        f"Не удалось загрузить спецификацию из {url}. Проверьте URL или путь к файлу."
    )


def _generate_sdk_core(config: GeneratorConfig) -> Project:
    """Ядро генерации - только генерация без сохранения"""
    if not config.url:
        raise ValueError("URL не указан в конфигурации")

    print(f"🚀 Генерация SDK из {config.url}")
    print("📥 Загрузка OpenAPI спецификации...")
    openapi_spec = load_specification(config.url)

    print("⚙️ Генерация кода...")
    return SdkGenerator(openapi_spec, config).generate()


def _save_project_files(project: Project, target_path: str):
    """Сохранение файлов проекта"""
    print(f"💾 Сохранение {len(project.files)} файлов...")

    for code_file in project.files:
        path = os.path.join(target_path, code_file.file_name)
        os.makedirs(os.path.dirname(path), exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            f.write(str(code_file))

    print("✅ Генерация завершена успешно!")
    print(f"📦 SDK создан в: {os.path.abspath(target_path)}")


def _generate_sdk(config: GeneratorConfig, work_dir: str):
    """Генерация SDK в новую директорию"""
    if not config.dirname:
        raise ValueError("Директория не указана в конфигурации")

    project = _generate_sdk_core(config)
    _save_project_files(project, os.path.join(work_dir, config.dirname))


def _generate_sdk_in_existing(config: GeneratorConfig, existing_package_dir: str):
    """Генерация SDK в существующую директорию пакета"""
    project = _generate_sdk_core(config)
    _save_project_files(project, existing_package_dir)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Генерация Python SDK из OpenAPI")
    parser.add_argument("--url", type=str, help="URL или путь к OpenAPI спецификации")
    parser.add_argument("--dirname", type=str, help="Директория для генерации SDK")
    parser.add_argument("--namespace", type=str, help="Базовый модуль SDK")
    parser.add_argument(
        "--init-config", action="store_true", help=f"Создать конфиг файл {CONFIG_FILE_NAME}"
    )
    parser.add_argument(
        "--find", action="store_true", help="Найти SDK пакеты и обновить выбранный"
    )
    parser.add_argument(
        "--force", action="store_true", help="Генерировать без подтверждения"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Подробный лог генерации"
    )
    return parser


def generate(argv: List[str] = None):
    """Универсальная команда генерации SDK"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.find:
        interactive_find_packages()
        return

    # Инициализация конфига
    if args.init_config:
        config = GeneratorConfig(
            url=args.url,
            dirname=args.dirname or "sdk_client",
            namespace=args.namespace or "sdk_client",
        )
        config.save_to_file()
        print(f"✅ Создан конфиг файл {CONFIG_FILE_NAME}")
        return

    file_config = GeneratorConfig.from_file(search_dir=args.dirname)

    if file_config and (args.url or args.namespace):
        print(f"🔧 Найден конфиг файл {CONFIG_FILE_NAME}:")
        print(f"   URL: {file_config.url}")
        print(f"   Namespace: {file_config.namespace}")
        print()

        if args.force or confirm_choice("Использовать конфиг из файла?"):
            final_config = file_config
        else:
            final_config = file_config.merge_with_args(args)
    elif file_config:
        print(f"📋 Используется конфиг {CONFIG_FILE_NAME}")
        final_config = file_config
    elif args.url:
        final_config = GeneratorConfig().merge_with_args(args)
        final_config.dirname = final_config.dirname or "sdk_client"
    else:
        print("❌ Ошибка: Укажите --url или создайте конфиг с --init-config")
        sys.exit(1)

    if not final_config.url:
        print("❌ Ошибка: URL не указан ни в конфиге, ни в аргументах")
        sys.exit(1)

    try:
        if args.dirname and file_config:
            print(f"📁 Генерация в существующую папку: {args.dirname}")
            _generate_sdk_in_existing(final_config, args.dirname)
            work_path = args.dirname
        else:
            print(f"📁 Создание новой папки: {final_config.dirname}")
            _generate_sdk(final_config, ".")
            work_path = os.path.join(os.getcwd(), final_config.dirname)

        if not file_config and (
            args.force or confirm_choice(f"Сохранить настройки в {CONFIG_FILE_NAME}?")
        ):
            config_path = os.path.join(work_path, CONFIG_FILE_NAME)
            final_config.save_to_file(config_path)
            print(f"💾 Конфиг сохранен в {config_path}")

    except (GenerationError, SpecificationError, ValueError, OSError, httpx.HTTPError) as e:
        print(f"❌ Ошибка генерации: {e}")
        sys.exit(1)


if __name__ == "__main__":
    generate()
