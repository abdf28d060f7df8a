# src/cdrom_builder/core/__init__.py
"""
Core do cdrom_builder.

Componentes principais:
    - config     → carregamento e merge de configuração (defaults + local)
    - pipeline   → protocolo de Step, tipos de resultado e RunContext
    - engine     → execução sequencial, HALT e cleanup reverso
    - errors     → payload canônico de erro e catálogo de códigos
    - exceptions → exceções tipadas (staging, ferramenta, configuração)

Princípios fundamentais:
    - Nenhuma decisão silenciosa: todo comportamento é explícito e testado
    - Erros são escritos uma única vez e interrompem o pipeline
    - Recursos temporários nunca sobrevivem ao cleanup
"""
